"""Host bridges: template files, the render surface, and form inputs."""

from perch.bridge.files import FileRenderBridge
from perch.bridge.protocol import FormBridge, RenderBridge
from perch.bridge.script import ScriptFormBridge

__all__ = [
    "FileRenderBridge",
    "FormBridge",
    "RenderBridge",
    "ScriptFormBridge",
]
