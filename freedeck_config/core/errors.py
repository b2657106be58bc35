"""
配置错误类型 — 模型与编解码器抛出的异常
"""


class ProfileError(Exception):
    """配置模型/编解码错误的基类"""


class OutOfRangeError(ProfileError, IndexError):
    """页面或按键索引越界"""


class InvalidRowLengthError(ProfileError, ValueError):
    """按键行数据超过 ROW_SIZE"""


class MalformedHeaderError(ProfileError, ValueError):
    """文件头宽/高非法或偏移量不一致"""


class TruncatedInputError(ProfileError, ValueError):
    """数据长度小于文件头声明的长度"""
