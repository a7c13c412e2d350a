"""
lib/tools/ToolCall.py

Purpose:
Defines the records of the tool-call audit trail: the status of one call, the call itself, and per-name aggregates.

Place in Architecture:
Returned by ToolRecorder. Built from tool_calls rows; never written back directly.

Interface:

	ToolCallStatus: PENDING, SUCCESS, ERROR. PENDING may move to either of the others, once.
	ToolCall: id, name, parameters, result, error, status, started_at, completed_at, duration_ms.
	ToolCallStats: name, total_calls, successful, failed, avg_duration_ms.

TODOs/FIXMEs:
None.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, Optional

from ..Utils import JsonLoad


# A call starts PENDING and ends in exactly one of SUCCESS or ERROR.
class ToolCallStatus(Enum):
	PENDING = "pending"
	SUCCESS = "success"
	ERROR = "error"

	def __str__(this):
		return this.value

	@property
	def is_complete(this):
		return this is not ToolCallStatus.PENDING


@dataclass
class ToolCall:
	id: int
	name: str
	status: ToolCallStatus
	started_at: float
	parameters: Any = None
	result: Any = None
	error: Optional[str] = None
	completed_at: Optional[float] = None
	duration_ms: Optional[int] = None
	agent_id: Optional[str] = None

	@classmethod
	def FromRow(cls, row):
		return cls(
			id=int(row['id']),
			name=row['name'],
			status=ToolCallStatus(row['status']),
			started_at=float(row['started_at']),
			parameters=JsonLoad(row['parameters']),
			result=JsonLoad(row['result']),
			error=row['error'],
			completed_at=None if row['completed_at'] is None else float(row['completed_at']),
			duration_ms=None if row['duration_ms'] is None else int(row['duration_ms']),
			agent_id=row.get('agent_id'),
		)


@dataclass
class ToolCallStats:
	name: str
	total_calls: int
	successful: int
	failed: int
	avg_duration_ms: float
