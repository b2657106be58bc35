"""
按键动作记录 — 固定长度的行编码/解码、默认页面生成

行格式 (ROW_SIZE 字节, 不足补 0):
  [0]    动作类型 (0 = 无操作, 1 = 跳转页面)
  [1]    跳转页面: 目标页索引
  [2..]  保留, 原样保留
"""

from dataclasses import dataclass
from enum import IntEnum

from .errors import InvalidRowLengthError


ROW_SIZE = 8
PARAM_SIZE = ROW_SIZE - 1


class ActionType(IntEnum):
    NONE = 0       # 无操作
    GOTO_PAGE = 1  # 跳转页面 (参数: 目标页索引)


@dataclass
class ActionRecord:
    """单个按键的动作配置"""
    action_type: int = ActionType.NONE
    params: bytes = b""  # 动作类型之后的参数字节, 未知类型原样保留

    def __post_init__(self):
        params = bytes(self.params)
        if len(params) > PARAM_SIZE:
            raise InvalidRowLengthError(f"Params are {len(params)} bytes, max {PARAM_SIZE}")
        self.params = params + bytes(PARAM_SIZE - len(params))
        try:
            self.action_type = ActionType(self.action_type)
        except ValueError:
            pass

    @property
    def target_page(self) -> int:
        return self.params[0]

    @property
    def label(self) -> str:
        """生成人类可读的标签"""
        if self.action_type == ActionType.NONE:
            return "None"
        if self.action_type == ActionType.GOTO_PAGE:
            return f"Page {self.target_page}"
        return f"Action 0x{self.action_type:02X}"

    @classmethod
    def noop(cls) -> "ActionRecord":
        return cls(ActionType.NONE)

    @classmethod
    def goto_page(cls, target: int) -> "ActionRecord":
        if not 0 <= target <= 0xFF:
            raise ValueError(f"Target page {target} does not fit in one byte")
        return cls(ActionType.GOTO_PAGE, bytes([target]))


def decode_row(data: bytes) -> ActionRecord:
    """解析一行 (不足 ROW_SIZE 视为补 0)"""
    data = pad_row(data)
    return ActionRecord(data[0], data[1:])


def encode_row(record: ActionRecord) -> bytes:
    """编码为 ROW_SIZE 字节"""
    return bytes([int(record.action_type)]) + record.params


def pad_row(row) -> bytes:
    """右侧补 0 至 ROW_SIZE, 超长报错"""
    if isinstance(row, ActionRecord):
        return encode_row(row)
    data = bytes(row)
    if len(data) > ROW_SIZE:
        raise InvalidRowLengthError(f"Row is {len(data)} bytes, max {ROW_SIZE}")
    return data + bytes(ROW_SIZE - len(data))


def default_row_buffer(width: int, height: int, previous_page_index: int) -> bytearray:
    """新页面的默认按键: 0 号键返回上一页, 其余无操作

    previous_page_index 为负数或超出一个字节时, 所有按键均为无操作
    """
    page = bytearray(width * height * ROW_SIZE)
    if 0 <= previous_page_index <= 0xFF:
        page[0:ROW_SIZE] = encode_row(ActionRecord.goto_page(previous_page_index))
    return page
