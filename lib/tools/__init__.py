from .ToolCall import ToolCall, ToolCallStats, ToolCallStatus
from .ToolRecorder import ToolRecorder
