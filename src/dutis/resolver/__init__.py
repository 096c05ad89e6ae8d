from .content_type import ContentTypeResolver
from .role_handlers import ROLE_HANDLERS_SWIFT, RoleHandlerSource, SwiftRoleHandlerSource
from .script_runner import ScriptRunner, SubprocessScriptRunner

__all__ = [
    "ContentTypeResolver",
    "ROLE_HANDLERS_SWIFT",
    "RoleHandlerSource",
    "ScriptRunner",
    "SubprocessScriptRunner",
    "SwiftRoleHandlerSource",
]
