from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .script_runner import ScriptRunner, SubprocessScriptRunner

# Prints one application URL per line for every bundle registered, in any
# role, for the content type given as the first argument.
ROLE_HANDLERS_SWIFT = """\
import CoreServices
import Foundation

let args = CommandLine.arguments
guard args.count > 1 else {
    print("Missing argument")
    exit(1)
}

let fileType = args[1]

guard let bundleIds = LSCopyAllRoleHandlersForContentType(fileType as CFString, LSRolesMask.all) else {
    exit(0)
}

(bundleIds.takeRetainedValue() as NSArray)
    .compactMap { bundleId -> NSArray? in
        guard let retVal = LSCopyApplicationURLsForBundleIdentifier(bundleId as! CFString, nil) else { return nil }
        return retVal.takeRetainedValue() as NSArray
    }
    .flatMap { $0 }
    .forEach { print($0) }
"""

class RoleHandlerSource(Protocol):
    """Content type -> raw application URLs registered to open it."""

    def handlers_for(self, content_type: str) -> list[str]:
        ...

@dataclass
class SwiftRoleHandlerSource:
    """Ask Launch Services through the embedded Swift script."""

    runner: ScriptRunner = field(default_factory=SubprocessScriptRunner)
    source: str = ROLE_HANDLERS_SWIFT

    def handlers_for(self, content_type: str) -> list[str]:
        return self.runner.run(self.source, [content_type])
