"""
编辑器状态中心 — 持有当前配置，所有编辑操作经由此处
通过 Qt 信号通知界面层
"""

import logging

from PySide6.QtCore import QObject, QThread, Signal, Slot

from .config_manager import ConfigManager
from .errors import ProfileError
from .profile import ProfileModel

logger = logging.getLogger(__name__)


class ProfileLoadWorker(QThread):
    """后台加载线程: 读取并解析配置文件

    QThread 自带的 finished 信号在线程退出后发出, 用于释放线程对象
    """
    load_done = Signal(int, bool, object)  # request_id, success, ProfileModel 或错误信息

    def __init__(self, manager: ConfigManager, path: str, request_id: int = 0, parent=None):
        super().__init__(parent)
        self._manager = manager
        self._path = path
        self.request_id = request_id

    def run(self):
        try:
            profile = self._manager.load_profile(self._path)
            self.load_done.emit(self.request_id, True, profile)
        except (ProfileError, OSError) as e:
            logger.warning("Loading %s failed: %s", self._path, e)
            self.load_done.emit(self.request_id, False, str(e))


class EditorState(QObject):
    """中心状态管理器"""

    # 信号
    profile_changed = Signal(object)
    page_added = Signal(int)
    page_deleted = Signal(int)
    row_changed = Signal(int, int)      # page_index, display_index
    image_changed = Signal(int, int)    # page_index, display_index
    error_occurred = Signal(str)

    def __init__(self, manager: ConfigManager = None, parent=None):
        super().__init__(parent)
        self._manager = manager or ConfigManager()
        self._profile = self._manager.new_profile(pages=0)
        self._load_seq = 0          # 最近一次后台加载的请求号
        self._workers = {}          # request_id -> ProfileLoadWorker

    @property
    def manager(self) -> ConfigManager:
        return self._manager

    @property
    def profile(self) -> ProfileModel:
        return self._profile

    @profile.setter
    def profile(self, value: ProfileModel):
        self._profile = value
        self.profile_changed.emit(value)

    # ==============================
    # 编辑操作
    # ==============================

    def set_row(self, row, page_index: int, display_index: int) -> bool:
        try:
            self._profile.set_row(row, page_index, display_index)
        except ProfileError as e:
            self.error_occurred.emit(f"修改按键失败: {e}")
            return False
        self.row_changed.emit(page_index, display_index)
        return True

    def set_image(self, image: bytes, page_index: int, display_index: int) -> bool:
        try:
            self._profile.set_image(image, page_index, display_index)
        except ProfileError as e:
            self.error_occurred.emit(f"修改图标失败: {e}")
            return False
        self.image_changed.emit(page_index, display_index)
        return True

    def add_page(self, previous_page_index: int = -1) -> int:
        index = self._profile.add_page(previous_page_index)
        self.page_added.emit(index)
        return index

    def delete_page(self, page_index: int) -> bool:
        try:
            self._profile.delete_page(page_index)
        except ProfileError as e:
            self.error_occurred.emit(f"删除页面失败: {e}")
            return False
        self.page_deleted.emit(page_index)
        return True

    # ==============================
    # 文件操作
    # ==============================

    def new_profile(self, width: int = None, height: int = None):
        self.profile = self._manager.new_profile(width, height)

    def load_file(self, path: str) -> bool:
        """同步加载; 失败时保留当前配置"""
        try:
            profile = self._manager.load_profile(path)
        except (ProfileError, OSError) as e:
            self.error_occurred.emit(f"加载失败: {e}")
            return False
        self.profile = profile
        return True

    @property
    def loading(self) -> bool:
        return any(worker.isRunning() for worker in self._workers.values())

    def load_file_async(self, path: str) -> ProfileLoadWorker:
        """后台加载, 完成后替换当前配置

        多次请求时只采用最后一次的结果, 较早的结果直接丢弃。
        线程以 self 为父对象, 直到线程退出后才释放。
        """
        self._load_seq += 1
        worker = ProfileLoadWorker(self._manager, path, self._load_seq, parent=self)
        worker.load_done.connect(self._on_load_done)
        worker.finished.connect(self._on_worker_finished)
        self._workers[worker.request_id] = worker
        worker.start()
        return worker

    @Slot(int, bool, object)
    def _on_load_done(self, request_id: int, success: bool, result):
        if request_id != self._load_seq:
            logger.debug("Dropping superseded load #%d", request_id)
            return
        if success:
            self.profile = result
        else:
            self.error_occurred.emit(f"加载失败: {result}")

    @Slot()
    def _on_worker_finished(self):
        request_id = getattr(self.sender(), "request_id", None)
        worker = self._workers.pop(request_id, None)
        if worker is not None:
            worker.deleteLater()

    def save_file(self, path: str) -> bool:
        try:
            self._manager.save_profile(self._profile, path)
        except (ValueError, OSError) as e:
            self.error_occurred.emit(f"保存失败: {e}")
            return False
        return True
