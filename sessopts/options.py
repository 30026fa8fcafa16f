"""选项文档解码的行为标志.

该模块定义了用于控制 `loads` 和各解码器行为的选项标志.
"""

from enum import IntFlag


class DecodeOption(IntFlag):
    """解码选项标志.

    可以使用位运算组合多个选项:
        option = DecodeOption.STRICT_SUBDOCUMENTS
    """

    # 默认行为: 选项层级严格, 关注点子文档中的未知键被忽略
    NONE = 0x0000

    # readConcern / readPreference / writeConcern 子文档中的未知键同样视为错误
    STRICT_SUBDOCUMENTS = 0x0001
