"""
配置管理 — 设备配置文件读写、编辑器设置 JSON 导入/导出
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .image_processor import ICON_HEIGHT, ICON_WIDTH, THRESHOLD, render_back_icon
from .profile import ProfileModel
from .profile_codec import decode_profile, encode_profile

logger = logging.getLogger(__name__)


@dataclass
class EditorSettings:
    """编辑器设置"""
    default_width: int = 3
    default_height: int = 2
    icon_width: int = ICON_WIDTH
    icon_height: int = ICON_HEIGHT
    threshold: int = THRESHOLD
    last_directory: str = ""

    def to_dict(self) -> dict:
        return {
            "version": ConfigManager.SCHEMA_VERSION,
            "default_width": self.default_width,
            "default_height": self.default_height,
            "icon_width": self.icon_width,
            "icon_height": self.icon_height,
            "threshold": self.threshold,
            "last_directory": self.last_directory,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "EditorSettings":
        return cls(
            default_width=d.get("default_width", 3),
            default_height=d.get("default_height", 2),
            icon_width=d.get("icon_width", ICON_WIDTH),
            icon_height=d.get("icon_height", ICON_HEIGHT),
            threshold=d.get("threshold", THRESHOLD),
            last_directory=d.get("last_directory", ""),
        )


class ConfigManager:
    """设备配置文件与编辑器设置的保存和加载"""

    SCHEMA_VERSION = 1

    def __init__(self, settings: EditorSettings = None):
        self.settings = settings or EditorSettings()

    # ==============================
    # 设备配置文件 (二进制)
    # ==============================

    def save_profile(self, profile: ProfileModel, path: str):
        """编码并写入配置文件"""
        data = encode_profile(
            profile, self.settings.icon_width, self.settings.icon_height, self.settings.threshold
        )
        Path(path).write_bytes(data)
        logger.info("Saved %d page(s) to %s (%d bytes)", profile.page_count, path, len(data))

    def load_profile(self, path: str) -> ProfileModel:
        """读取并解析配置文件, I/O 错误原样抛出"""
        data = Path(path).read_bytes()
        profile = decode_profile(data, self.settings.icon_width, self.settings.icon_height)
        logger.info("Loaded %d page(s) from %s", profile.page_count, path)
        return profile

    # ==============================
    # 编辑器设置 (JSON)
    # ==============================

    def save_settings(self, path: str):
        """保存设置到 JSON 文件"""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.settings.to_dict(), f, ensure_ascii=False, indent=2)

    def load_settings(self, path: str) -> EditorSettings:
        """从 JSON 文件加载设置, 文件不存在时使用默认值"""
        if not Path(path).exists():
            logger.debug("No settings at %s, using defaults", path)
            self.settings = EditorSettings()
            return self.settings

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        version = data.get("version", 1)
        if version > self.SCHEMA_VERSION:
            raise ValueError(f"设置文件版本 {version} 不兼容，当前支持版本 {self.SCHEMA_VERSION}")

        self.settings = EditorSettings.from_dict(data)
        return self.settings

    def new_profile(self, width: int = None, height: int = None, pages: int = 1) -> ProfileModel:
        """按默认尺寸创建配置, 第一页之后的页面均带返回首页的按键"""
        s = self.settings
        profile = ProfileModel(
            width if width is not None else s.default_width,
            height if height is not None else s.default_height,
            back_image=render_back_icon(s.icon_width, s.icon_height),
            blank_image=bytes(s.icon_width * s.icon_height),
        )
        for i in range(pages):
            profile.add_page(0 if i else -1)
        return profile
