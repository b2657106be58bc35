"""
配置数据模型 — 页面 (按键动作) 与图标的内存表示

images 为扁平列表, 第 page_index 页第 display_index 个按键的图标位于
page_index * width * height + display_index
"""

import logging
from typing import Optional

from .errors import OutOfRangeError
from .image_processor import BACK_IMAGE, BLANK_IMAGE
from .rows import ROW_SIZE, ActionRecord, ActionType, decode_row, default_row_buffer, pad_row

logger = logging.getLogger(__name__)


def renumber_page_targets(pages: list[bytearray], deleted_index: int, slots: int) -> int:
    """删除页面后修正所有 "跳转页面" 的目标索引

    目标 >= deleted_index 的减 1 (最小为 0), 更小的目标保持不变。
    返回被修改的行数。
    """
    changed = 0
    for page in pages:
        for i in range(slots):
            offset = i * ROW_SIZE
            if page[offset] != ActionType.GOTO_PAGE:
                continue
            target = page[offset + 1]
            if target >= deleted_index:
                page[offset + 1] = max(target - 1, 0)
                changed += 1
    return changed


class ProfileModel:
    """设备配置: 尺寸 + 页面列表 + 图标列表"""

    def __init__(
        self,
        width: int,
        height: int,
        pages: Optional[list] = None,
        images: Optional[list] = None,
        back_image: bytes = BACK_IMAGE,
        blank_image: bytes = BLANK_IMAGE,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid grid size {width}x{height}")
        self.width = width
        self.height = height
        self.back_image = bytes(back_image)
        self.blank_image = bytes(blank_image)
        self.pages: list[bytearray] = [bytearray(p) for p in (pages or [])]
        self.images: list[bytes] = [bytes(i) for i in (images or [])]

        for index, page in enumerate(self.pages):
            if len(page) != self.page_size:
                raise ValueError(f"Page {index} is {len(page)} bytes, expected {self.page_size}")
        if len(self.images) != len(self.pages) * self.slots_per_page:
            raise ValueError(
                f"{len(self.images)} images for {len(self.pages)} page(s), "
                f"expected {len(self.pages) * self.slots_per_page}"
            )

    @property
    def slots_per_page(self) -> int:
        return self.width * self.height

    @property
    def page_size(self) -> int:
        return self.slots_per_page * ROW_SIZE

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def __eq__(self, other):
        if not isinstance(other, ProfileModel):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.pages == other.pages
            and self.images == other.images
        )

    def __repr__(self):
        return f"ProfileModel({self.width}x{self.height}, pages={self.page_count})"

    def copy(self) -> "ProfileModel":
        return ProfileModel(
            self.width, self.height, self.pages, self.images,
            back_image=self.back_image, blank_image=self.blank_image,
        )

    # ==============================
    # 索引
    # ==============================

    def _check_slot(self, page_index: int, display_index: int):
        if not 0 <= page_index < self.page_count:
            raise OutOfRangeError(f"Page {page_index} out of range (0..{self.page_count - 1})")
        if not 0 <= display_index < self.slots_per_page:
            raise OutOfRangeError(
                f"Display {display_index} out of range (0..{self.slots_per_page - 1})"
            )

    def image_index(self, page_index: int, display_index: int) -> int:
        """扁平图标索引"""
        self._check_slot(page_index, display_index)
        return page_index * self.slots_per_page + display_index

    def get_image(self, page_index: int, display_index: int) -> bytes:
        return self.images[self.image_index(page_index, display_index)]

    def get_row(self, page_index: int, display_index: int) -> ActionRecord:
        self._check_slot(page_index, display_index)
        offset = display_index * ROW_SIZE
        return decode_row(self.pages[page_index][offset:offset + ROW_SIZE])

    # ==============================
    # 编辑操作
    # ==============================

    def set_image(self, image: bytes, page_index: int, display_index: int):
        """替换单个按键的图标"""
        self.images[self.image_index(page_index, display_index)] = bytes(image)

    def set_row(self, row, page_index: int, display_index: int):
        """写入单个按键的动作行, 不足 ROW_SIZE 补 0"""
        data = pad_row(row)
        self._check_slot(page_index, display_index)
        offset = display_index * ROW_SIZE
        self.pages[page_index][offset:offset + ROW_SIZE] = data

    def add_page(self, previous_page_index: int) -> int:
        """追加一页, 返回新页索引

        返回键只在目标页存在时写入 (含新页自身), 否则整页为无操作
        """
        new_index = self.page_count
        if previous_page_index > new_index:
            previous_page_index = -1
        page = default_row_buffer(self.width, self.height, previous_page_index)
        self.pages.append(bytearray(page))
        self.images.append(self.back_image)
        self.images.extend([self.blank_image] * (self.slots_per_page - 1))
        logger.debug("Added page %d (back -> %d)", new_index, previous_page_index)
        return new_index

    def delete_page(self, page_index: int):
        """删除页面及其图标, 并修正其余页面的跳转目标"""
        if not 0 <= page_index < self.page_count:
            raise OutOfRangeError(f"Page {page_index} out of range (0..{self.page_count - 1})")

        start = page_index * self.slots_per_page
        del self.images[start:start + self.slots_per_page]
        del self.pages[page_index]

        changed = renumber_page_targets(self.pages, page_index, self.slots_per_page)
        logger.debug("Deleted page %d, renumbered %d row(s)", page_index, changed)
