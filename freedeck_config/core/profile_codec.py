"""
配置文件编解码 — 设备固件读取的二进制格式

文件格式:
  [Width:1][Height:1][Offset:2 LE]     文件头, Offset = 页数 * width * height + 1
  [Pages: 页数 * width * height * ROW_SIZE]
  [Images: 页数 * width * height * 打包图标大小]
"""

import logging
import struct

from .errors import MalformedHeaderError, TruncatedInputError
from .image_processor import (
    ICON_HEIGHT, ICON_WIDTH, THRESHOLD, optimize_for_ssd1306, packed_image_size, render_back_icon,
)
from .profile import ProfileModel
from .rows import ROW_SIZE

logger = logging.getLogger(__name__)

HEADER_FORMAT = "<BBH"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 4


def header_offset(page_count: int, width: int, height: int) -> int:
    """文件头中的偏移字段"""
    return page_count * width * height + 1


def build_header(page_count: int, width: int, height: int) -> bytes:
    """构建文件头: [Width:1][Height:1][Offset:2 LE]"""
    offset = header_offset(page_count, width, height)
    if width > 0xFF or height > 0xFF:
        raise ValueError(f"Grid size {width}x{height} does not fit in the header")
    if offset > 0xFFFF:
        raise ValueError(f"Too many pages for the header offset field ({page_count})")
    return struct.pack(HEADER_FORMAT, width, height, offset)


def parse_header(data: bytes) -> tuple[int, int, int]:
    """解析文件头, 返回 (width, height, page_count)"""
    if len(data) < HEADER_SIZE:
        raise MalformedHeaderError(f"Header needs {HEADER_SIZE} bytes, got {len(data)}")
    width, height, offset = struct.unpack_from(HEADER_FORMAT, data)
    if width <= 0 or height <= 0:
        raise MalformedHeaderError(f"Invalid grid size {width}x{height}")
    slots = width * height
    if offset < 1 or (offset - 1) % slots != 0:
        raise MalformedHeaderError(f"Offset {offset} does not match a {width}x{height} grid")
    return width, height, (offset - 1) // slots


def pack_image(
    image: bytes,
    icon_width: int = ICON_WIDTH,
    icon_height: int = ICON_HEIGHT,
    threshold: int = THRESHOLD,
) -> bytes:
    """原始位图转换为打包格式; 已打包的图标 (来自已加载的文件) 原样写出"""
    if len(image) == icon_width * icon_height:
        return optimize_for_ssd1306(image, icon_width, icon_height, threshold)
    if len(image) == packed_image_size(icon_width, icon_height):
        return bytes(image)
    raise ValueError(f"Image is {len(image)} bytes, neither raw nor packed {icon_width}x{icon_height}")


def encode_profile(
    profile: ProfileModel,
    icon_width: int = ICON_WIDTH,
    icon_height: int = ICON_HEIGHT,
    threshold: int = THRESHOLD,
) -> bytes:
    """编码完整配置: 文件头 + 页面 + 打包后的图标"""
    header = build_header(profile.page_count, profile.width, profile.height)
    images = [pack_image(image, icon_width, icon_height, threshold) for image in profile.images]
    return b"".join([header, *profile.pages, *images])


def decode_profile(
    data: bytes,
    icon_width: int = ICON_WIDTH,
    icon_height: int = ICON_HEIGHT,
) -> ProfileModel:
    """解析配置文件; 图标保持打包格式, 不做逆转换"""
    data = bytes(data)
    width, height, page_count = parse_header(data)
    slots = width * height
    page_size = slots * ROW_SIZE
    image_size = packed_image_size(icon_width, icon_height)

    offset = HEADER_SIZE
    pages_end = offset + page_count * page_size
    if len(data) < pages_end:
        raise TruncatedInputError(
            f"{page_count} page(s) need {pages_end} bytes, got {len(data)}"
        )
    pages = [data[pos:pos + page_size] for pos in range(offset, pages_end, page_size)]

    images_end = pages_end + page_count * slots * image_size
    if len(data) < images_end:
        raise TruncatedInputError(
            f"{page_count * slots} image(s) need {images_end} bytes, got {len(data)}"
        )
    images = [data[pos:pos + image_size] for pos in range(pages_end, images_end, image_size)]

    if len(data) > images_end:
        logger.warning("Ignoring %d trailing byte(s) after images", len(data) - images_end)

    return ProfileModel(
        width, height, pages, images,
        back_image=render_back_icon(icon_width, icon_height),
        blank_image=bytes(icon_width * icon_height),
    )
