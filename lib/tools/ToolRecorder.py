"""
lib/tools/ToolRecorder.py

Purpose:
Records every tool an agent invokes (name, parameters, outcome, timing) in the tool_calls table and answers questions about that history.

Place in Architecture:
What AgentFS.tools points at. It shares the Database with the filesystem but touches only tool_calls. Every call is scoped to one agent_id, so several agents may share a store.

Interface:

	ToolRecorder(db, agent_id): bind to a Database.
	start(name, parameters=None): RETURNS the id of a new PENDING call.
	success(id, result=None) / error(id, message): complete a PENDING call.
	record(name, started_at, completed_at, parameters=None, result=None, error=None): RETURNS the id of an already finished call.
	get(id): RETURNS a ToolCall or None.
	list(limit=None), query(name=None, since=None): RETURN ToolCalls, newest first.
	stats_for(name): RETURNS ToolCallStats or None when name was never called.

TODOs/FIXMEs:
None.
"""

import logging

from ..Errors import ToolCallNotFound, InvalidTransition
from ..Utils import PreciseNow, JsonDump
from .ToolCall import ToolCall, ToolCallStats, ToolCallStatus

logger = logging.getLogger(__name__)

COLUMNS = "id, agent_id, name, parameters, result, error, status, started_at, completed_at, duration_ms"


def DurationMs(started_at, completed_at):
	return max(0, round((completed_at - started_at) * 1000))


class ToolRecorder(object):
	def __init__(this, db, agent_id):
		this.db = db
		this.agent_id = agent_id


	def __repr__(this):
		return f"<ToolRecorder {this.agent_id} on {this.db!r}>"


	def start(this, name, parameters=None):
		id = int(this.db.Insert('tool_calls', {
			'agent_id': this.agent_id,
			'name': name,
			'parameters': JsonDump(parameters),
			'status': ToolCallStatus.PENDING.value,
			'started_at': PreciseNow(),
		}))
		logger.debug(f"Tool call {name} ({id}) started.")
		return id


	def success(this, id, result=None):
		this.Complete(id, ToolCallStatus.SUCCESS, result=JsonDump(result))

	def error(this, id, message):
		this.Complete(id, ToolCallStatus.ERROR, error=str(message))


	# The status guard in the UPDATE is what makes the transition one-shot, even when two completions race.
	def Complete(this, id, status, result=None, error=None):
		with this.db.Transaction():
			rows = this.db.Execute(
				"SELECT status, started_at FROM tool_calls WHERE id = :id AND agent_id = :agent",
				{'id': id, 'agent': this.agent_id}
			)
			if (not rows):
				raise ToolCallNotFound(f"no tool call {id} for agent {this.agent_id}")
			if (rows[0]['status'] != ToolCallStatus.PENDING.value):
				raise InvalidTransition(f"tool call {id} is already {rows[0]['status']}")

			completed = PreciseNow()
			updated = this.db.Modify(
				"UPDATE tool_calls SET status = :status, result = :result, error = :error, "
				"completed_at = :completed, duration_ms = :duration "
				"WHERE id = :id AND status = :pending",
				{
					'id': id,
					'status': status.value,
					'result': result,
					'error': error,
					'completed': completed,
					'duration': DurationMs(float(rows[0]['started_at']), completed),
					'pending': ToolCallStatus.PENDING.value,
				}
			)
			if (not updated):
				raise InvalidTransition(f"tool call {id} was completed concurrently")

		logger.debug(f"Tool call {id} completed: {status}.")


	def record(this, name, started_at, completed_at, parameters=None, result=None, error=None):
		status = ToolCallStatus.ERROR if error is not None else ToolCallStatus.SUCCESS
		return int(this.db.Insert('tool_calls', {
			'agent_id': this.agent_id,
			'name': name,
			'parameters': JsonDump(parameters),
			'result': JsonDump(result),
			'error': None if error is None else str(error),
			'status': status.value,
			'started_at': float(started_at),
			'completed_at': float(completed_at),
			'duration_ms': DurationMs(float(started_at), float(completed_at)),
		}))


	def get(this, id):
		rows = this.db.Execute(
			f"SELECT {COLUMNS} FROM tool_calls WHERE id = :id AND agent_id = :agent",
			{'id': id, 'agent': this.agent_id}
		)
		if (not rows):
			return None
		return ToolCall.FromRow(rows[0])


	def list(this, limit=None):
		command = f"SELECT {COLUMNS} FROM tool_calls WHERE agent_id = :agent ORDER BY started_at DESC, id DESC"
		params = {'agent': this.agent_id}
		if (limit is not None):
			command += " LIMIT :limit"
			params['limit'] = int(limit)
		return [ToolCall.FromRow(row) for row in this.db.Execute(command, params)]


	def query(this, name=None, since=None):
		conditions = ["agent_id = :agent"]
		params = {'agent': this.agent_id}
		if (name is not None):
			conditions.append("name = :name")
			params['name'] = name
		if (since is not None):
			conditions.append("started_at >= :since")
			params['since'] = float(since)

		rows = this.db.Execute(
			f"SELECT {COLUMNS} FROM tool_calls WHERE {' AND '.join(conditions)} ORDER BY started_at DESC, id DESC",
			params
		)
		return [ToolCall.FromRow(row) for row in rows]


	# Pending calls count toward total_calls only; the average covers completed calls.
	def stats_for(this, name):
		rows = this.db.Execute(
			"SELECT COUNT(*) AS total, "
			"SUM(CASE WHEN status = :success THEN 1 ELSE 0 END) AS successful, "
			"SUM(CASE WHEN status = :error THEN 1 ELSE 0 END) AS failed, "
			"AVG(CASE WHEN status <> :pending THEN duration_ms END) AS average "
			"FROM tool_calls WHERE agent_id = :agent AND name = :name",
			{
				'agent': this.agent_id,
				'name': name,
				'success': ToolCallStatus.SUCCESS.value,
				'error': ToolCallStatus.ERROR.value,
				'pending': ToolCallStatus.PENDING.value,
			}
		)
		row = rows[0]
		if (not row['total']):
			return None

		return ToolCallStats(
			name=name,
			total_calls=int(row['total']),
			successful=int(row['successful'] or 0),
			failed=int(row['failed'] or 0),
			avg_duration_ms=float(row['average'] or 0.0),
		)
