"""Tool registry exposed to the agent."""

from typing import Any, Dict, List
from pydantic import BaseModel, Field


class ToolDefinition(BaseModel):
    """A callable tool and the JSON schema of its arguments."""
    name: str
    description: str
    input_schema: Dict[str, Any] = Field(..., description="JSON schema for the tool's arguments")

    @property
    def required_arguments(self) -> List[str]:
        return list(self.input_schema.get("required", []))


def _instruction_schema(description: str) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {"instruction": {"type": "string", "description": description}},
        "required": ["instruction"],
    }


TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="manage_inventory_items",
        description=(
            "Add, update, search, delete, or manage inventory items using natural language instructions. "
            "Supports adding items with tags, notes, custom fields, and organizing them in containers."
        ),
        input_schema=_instruction_schema(
            'Natural language instruction for the item operation. Examples: "Add a new laptop with tags '
            'electronics, work", "Search for items tagged with kitchen", "Delete item <id>"'
        ),
    ),
    ToolDefinition(
        name="manage_collections",
        description="Create, update, delete collections or manage items within collections using natural language instructions.",
        input_schema=_instruction_schema(
            'Natural language instruction for collection operations. Examples: "Create a new collection called '
            "'Kitchen Appliances'\", \"Add items <id>, <id> to collection <id>\", \"Delete collection <id>\""
        ),
    ),
    ToolDefinition(
        name="list_collections",
        description="List your collections.",
        input_schema={"type": "object", "properties": {}, "required": []},
    ),
    ToolDefinition(
        name="import_from_url",
        description="Import items from URLs (e.g., product pages, images) into the inventory.",
        input_schema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "URL to import from (product pages, images, etc.)"},
            },
            "required": ["url"],
        },
    ),
    ToolDefinition(
        name="manage_tags",
        description="Create, search, rename, or delete tags using natural language instructions.",
        input_schema=_instruction_schema(
            'Natural language instruction for tag operations. Examples: "Create tag electronics", '
            '"Search for tags containing kitchen", "Rename tag <id> to new-name", "Delete tag <id>"'
        ),
    ),
    ToolDefinition(
        name="get_inventory_stats",
        description="Get statistics about your inventory including item count, collection count, and storage used.",
        input_schema={"type": "object", "properties": {}, "required": []},
    ),
    ToolDefinition(
        name="authenticate",
        description="Authenticate with StashDog using email and password.",
        input_schema={
            "type": "object",
            "properties": {
                "email": {"type": "string", "description": "Email address"},
                "password": {"type": "string", "description": "Password"},
            },
            "required": ["email", "password"],
        },
    ),
    ToolDefinition(
        name="smart_search",
        description="Search your inventory with a natural language query that can include tags and paging hints.",
        input_schema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": 'Natural language search query. Example: "Find #kitchen items"',
                },
                "limit": {"type": "number", "description": "Maximum number of results to return (default: 20)"},
            },
            "required": ["query"],
        },
    ),
    ToolDefinition(
        name="manage_users",
        description="Fetch user details.",
        input_schema={
            "type": "object",
            "properties": {"userId": {"type": "string", "description": "ID of the user to fetch details for."}},
            "required": ["userId"],
        },
    ),
    ToolDefinition(
        name="manage_notifications",
        description="Fetch user notifications.",
        input_schema={
            "type": "object",
            "properties": {
                "status": {"type": "string", "description": "Filter notifications by status (e.g., UNREAD, READ)."},
                "limit": {"type": "number", "description": "Maximum number of notifications to fetch."},
                "offset": {"type": "number", "description": "Offset for pagination."},
            },
            "required": [],
        },
    ),
    ToolDefinition(
        name="manage_groups",
        description="Fetch user groups.",
        input_schema={"type": "object", "properties": {}, "required": []},
    ),
]

TOOLS_BY_NAME: Dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}
