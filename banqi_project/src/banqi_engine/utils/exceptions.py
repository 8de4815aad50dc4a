"""
异常定义

定义暗棋引擎外围各层使用的异常类型。规则引擎本身不抛出这些异常，
非法动作以拒绝结果的形式返回。
"""


class BanqiError(Exception):
    """
    暗棋引擎基础异常

    所有暗棋相关异常的基类。
    """

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class InvalidActionError(BanqiError):
    """
    非法动作异常

    严格模式的调用方把被拒绝的动作转换为此异常。
    """

    def __init__(self, action: str, reason: str = ""):
        message = f"非法动作: {action}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, "INVALID_ACTION")
        self.action = action
        self.reason = reason


class ConfigurationError(BanqiError):
    """
    配置错误异常

    当配置参数无效时抛出。
    """

    def __init__(self, config_name: str, reason: str = ""):
        message = f"配置错误 - {config_name}"
        if reason:
            message += f": {reason}"
        super().__init__(message, "CONFIG_ERROR")
        self.config_name = config_name
        self.reason = reason


class SessionNotFoundError(BanqiError):
    """会话未找到异常"""

    def __init__(self, session_id: str):
        super().__init__(f"会话不存在: {session_id}", "SESSION_NOT_FOUND")
        self.session_id = session_id
