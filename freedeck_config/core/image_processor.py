"""
图片处理 — 图标加载、缩放、SSD1306 单色位图打包
使用 Pillow 加载/缩放, numpy 完成阈值化与按页打包
"""

import numpy as np
from PIL import Image, ImageDraw

ICON_WIDTH = 32
ICON_HEIGHT = 32
RAW_IMAGE_SIZE = ICON_WIDTH * ICON_HEIGHT  # 1024 bytes, 每像素 1 字节灰度
THRESHOLD = 128                            # >= 128 点亮
SSD1306_PAGE_HEIGHT = 8                    # 控制器每页 8 行


def packed_image_size(width: int = ICON_WIDTH, height: int = ICON_HEIGHT) -> int:
    """打包后的字节数: ceil(height / 8) * width"""
    return -(-height // SSD1306_PAGE_HEIGHT) * width


def optimize_for_ssd1306(
    raw: bytes,
    width: int = ICON_WIDTH,
    height: int = ICON_HEIGHT,
    threshold: int = THRESHOLD,
) -> bytes:
    """将灰度位图转换为 SSD1306 页寻址格式

    每个输出字节对应一列中纵向的 8 个像素, LSB 为最上方像素。
    输出顺序: 先按页 (8 行一组), 页内从左到右逐列。
    """
    if len(raw) != width * height:
        raise ValueError(f"Raw image is {len(raw)} bytes, expected {width * height}")

    # 1. 阈值化
    lit = np.frombuffer(bytes(raw), dtype=np.uint8).reshape(height, width) >= threshold

    # 2. 补齐到 8 的整数倍行
    bands = -(-height // SSD1306_PAGE_HEIGHT)
    bits = np.zeros((bands * SSD1306_PAGE_HEIGHT, width), dtype=np.uint8)
    bits[:height] = lit

    # 3. 每组 8 行按位加权求和
    weights = (1 << np.arange(SSD1306_PAGE_HEIGHT, dtype=np.uint8)).reshape(1, -1, 1)
    packed = (bits.reshape(bands, SSD1306_PAGE_HEIGHT, width) * weights).sum(axis=1)

    return packed.astype(np.uint8).tobytes()


def load_icon(path: str, width: int = ICON_WIDTH, height: int = ICON_HEIGHT) -> bytes:
    """加载图片文件并转换为原始灰度位图"""
    with Image.open(path) as img:
        return process_icon(img.convert("L"), width, height)


def process_icon(
    img: Image.Image,
    width: int = ICON_WIDTH,
    height: int = ICON_HEIGHT,
) -> bytes:
    """缩放图片到图标尺寸并返回每像素 1 字节的灰度数据"""
    img = img.convert("L")

    # 1. 等比缩放
    w_src, h_src = img.size
    scale = min(width / w_src, height / h_src)
    new_w = max(1, int(w_src * scale))
    new_h = max(1, int(h_src * scale))
    resized = img.resize((new_w, new_h), Image.LANCZOS)

    # 2. 黑色背景
    canvas = Image.new("L", (width, height), 0)

    # 3. 居中合成
    canvas.paste(resized, ((width - new_w) // 2, (height - new_h) // 2))
    return canvas.tobytes()


def render_back_icon(width: int = ICON_WIDTH, height: int = ICON_HEIGHT) -> bytes:
    """绘制默认的 "返回" 箭头图标"""
    img = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(img)
    cy = height // 2
    tip_x = width // 8
    head_x = width * 7 // 16
    head_half = height * 9 // 32
    shaft_half = max(1, height * 3 // 32)
    draw.polygon([(tip_x, cy), (head_x, cy - head_half), (head_x, cy + head_half)], fill=255)
    draw.rectangle([head_x, cy - shaft_half, width - 1 - width // 8, cy + shaft_half], fill=255)
    return img.tobytes()


BLANK_IMAGE = bytes(RAW_IMAGE_SIZE)
BACK_IMAGE = render_back_icon()
