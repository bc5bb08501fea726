# weatherflow/nodes/builtin.py
import re
from datetime import datetime, timezone

from ..errors import NodeExecutionError
from ..models import ExecutionState, Node, NodeResult
from .base import NodeHandler, form_str, get_mapping, get_str, to_float

REQUIRED_FORM_FIELDS = ("name", "email", "city")
EMAIL_SENDER = "weather-alerts@example.com"


class StartHandler(NodeHandler):
    node_type = "start"

    async def execute(self, node: Node, state: ExecutionState) -> NodeResult:
        return NodeResult(output={"message": "Workflow execution started"})


class FormHandler(NodeHandler):
    """Checks that the caller supplied every field the rest of the graph reads."""
    node_type = "form"

    async def execute(self, node: Node, state: ExecutionState) -> NodeResult:
        for field in REQUIRED_FORM_FIELDS:
            if field not in state.form_data:
                raise NodeExecutionError(f"missing required field: {field}")
            value = state.form_data[field]
            if not isinstance(value, str) or not value.strip():
                raise NodeExecutionError(f"field {field} must be a non-empty string")

        return NodeResult(output={
            "message": f"Collected user input for {state.form_data['name']}",
            "formData": dict(state.form_data),
        })


class EmailHandler(NodeHandler):
    """
    Drafts the alert email from ``metadata.emailTemplate``.
    Nothing is delivered; the draft is only reported in the step output.
    """
    node_type = "email"

    async def execute(self, node: Node, state: ExecutionState) -> NodeResult:
        name = form_str(state, "name")
        email = form_str(state, "email")
        city = form_str(state, "city")
        temperature, _ = to_float((state.variables or {}).get("temperature"))

        template = get_mapping(node.data.metadata, "emailTemplate")
        replacements = {
            "{{name}}": name,
            "{{city}}": city,
            "{{temperature}}": f"{temperature:.1f}",
        }
        subject = render_template(get_str(template, "subject"), replacements)
        body = render_template(get_str(template, "body"), replacements)

        draft = {
            "to": email,
            "from": EMAIL_SENDER,
            "subject": subject,
            "body": body,
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        return NodeResult(output={
            "message": f"Weather alert email drafted for {email}",
            "emailDraft": draft,
            "emailContent": {"to": email, "subject": subject, "body": body},
            "emailSent": True,
        })


class EndHandler(NodeHandler):
    node_type = "end"

    async def execute(self, node: Node, state: ExecutionState) -> NodeResult:
        return NodeResult(output={"message": "Workflow execution completed"})


def render_template(text: str, replacements: dict) -> str:
    # single pass, so substituted values are never expanded again
    pattern = re.compile("|".join(re.escape(key) for key in replacements))
    return pattern.sub(lambda match: replacements[match.group(0)], text)
