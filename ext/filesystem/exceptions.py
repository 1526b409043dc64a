"""
FileSystem Exceptions - 存储客户端异常类定义
"""


class FileSystemError(Exception):
    """存储客户端基础异常类"""

    pass


class FileSystemConfigMissingError(FileSystemError):
    """缺少必要配置

    当 {id}.filesystem.* 中的必填项不存在或为空时抛出
    """

    pass


class FileSystemArgumentError(FileSystemError, ValueError):
    """参数/配置格式错误

    当 servers 格式不合法、数值配置无法解析或上传请求不合法时抛出
    """

    pass


class FileSystemProviderTypeError(FileSystemError):
    """不支持的存储类型

    当 {id}.filesystem.provider 不是已注册的类型时抛出
    """

    pass


class FileSystemProviderInitError(FileSystemError):
    """存储 Provider 初始化失败

    当后端连接或初始化失败时抛出（例如 tracker 不可达）
    """

    pass


class FileUploadError(FileSystemError):
    """文件上传错误"""

    pass


class FileDeleteError(FileSystemError):
    """文件删除错误"""

    pass


class FileSystemOperationNotSupportedError(FileSystemError, NotImplementedError):
    """Provider 不支持该操作

    例如 FastDFS 不支持生成上传凭证
    """

    pass
