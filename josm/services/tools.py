import logging
from datetime import datetime

from sqlalchemy import or_

from josm.errors import DuplicateEntry, IllegalTransition, NotFound, ValidationMissingField
from josm.extensions import db
from josm.models import Tool, ToolTransaction
from josm.models.tool import AVAILABLE, CHECKED_OUT, DAMAGED
from josm.utils import clean, require

logger = logging.getLogger(__name__)


def list_tools(q=None, status=None):
    query = Tool.query
    if q:
        like = f"%{q}%"
        query = query.filter(or_(Tool.name.ilike(like), Tool.code.ilike(like)))
    if status:
        query = query.filter_by(status=status)
    return query.order_by(Tool.name.asc()).all()


def get_tool(tool_id) -> Tool:
    tool = db.session.get(Tool, tool_id)
    if not tool:
        raise NotFound("Tool", tool_id)
    return tool


def create_tool(data) -> Tool:
    (name,) = require(data, "name")
    code = clean(data.get("code"))
    if code and Tool.query.filter_by(code=code).first():
        raise DuplicateEntry(f"Tool code {code} already exists")

    tool = Tool(
        name=name,
        code=code,
        category=clean(data.get("category")) or "General",
        status=AVAILABLE,
        is_damaged=False,
    )
    db.session.add(tool)
    db.session.commit()
    logger.info("tool %s created", tool.name)
    return tool


def update_tool(tool_id, data) -> Tool:
    tool = get_tool(tool_id)
    if clean(data.get("name")):
        tool.name = clean(data.get("name"))
    if "category" in data:
        tool.category = clean(data.get("category")) or "General"
    if "code" in data:
        code = clean(data.get("code"))
        if code and Tool.query.filter(Tool.code == code, Tool.id != tool.id).first():
            raise DuplicateEntry(f"Tool code {code} already exists")
        tool.code = code
    db.session.commit()
    return tool


def delete_tool(tool_id):
    tool = get_tool(tool_id)
    db.session.delete(tool)
    db.session.commit()


def checkout_tool(tool_id, worker_name, actor) -> Tool:
    worker_name = clean(worker_name)
    if not worker_name:
        raise ValidationMissingField("worker_name")

    tool = get_tool(tool_id)
    if tool.status != AVAILABLE:
        raise IllegalTransition(f"Tool {tool.name} is {tool.status}, not available")

    tool.status = CHECKED_OUT
    tool.checked_out_to = worker_name
    tool.checked_out_by = actor.id
    tool.checked_out_date = datetime.utcnow()
    _record(tool, "checkout", actor, f"Checked out to {worker_name}")
    db.session.commit()
    logger.info("tool %s checked out to %s by %s", tool.name, worker_name, actor.name)
    return tool


def return_tool(tool_id, actor, notes=None) -> Tool:
    tool = get_tool(tool_id)
    if tool.status != CHECKED_OUT:
        raise IllegalTransition(f"Tool {tool.name} is not checked out")

    _clear_checkout(tool)
    tool.status = AVAILABLE
    _record(tool, "return", actor, clean(notes))
    db.session.commit()
    logger.info("tool %s returned by %s", tool.name, actor.name)
    return tool


def mark_damaged(tool_id, actor, notes) -> Tool:
    notes = clean(notes)
    if not notes:
        raise ValidationMissingField("notes")

    tool = get_tool(tool_id)
    if tool.status == DAMAGED:
        raise IllegalTransition(f"Tool {tool.name} is already damaged")

    _clear_checkout(tool)
    tool.status = DAMAGED
    tool.is_damaged = True
    _record(tool, "damage", actor, notes)
    db.session.commit()
    logger.info("tool %s marked damaged by %s", tool.name, actor.name)
    return tool


def list_transactions(tool_id=None, start=None, end=None):
    query = ToolTransaction.query
    if tool_id is not None:
        query = query.filter(ToolTransaction.tool_id == tool_id)
    if start:
        query = query.filter(ToolTransaction.date >= start)
    if end:
        query = query.filter(ToolTransaction.date < end)
    return query.order_by(ToolTransaction.date.desc(), ToolTransaction.id.desc()).all()


def _clear_checkout(tool):
    tool.checked_out_to = None
    tool.checked_out_by = None
    tool.checked_out_date = None


def _record(tool, kind, actor, notes):
    db.session.add(ToolTransaction(
        tool_id=tool.id,
        tool_name=tool.name,
        transaction_type=kind,
        user_id=actor.id,
        user_name=actor.name,
        notes=notes,
    ))
