"""
Prompt and tool definitions for the route-change oracle.
"""

from typing import Any, Optional

from prdocumentator.collection.extractor import format_routes_context
from prdocumentator.models.github import GitHubPullRequest, GitHubRepository
from prdocumentator.models.routes import ExistingRoute

ANALYSIS_TOOL_NAME = "analyze_api_changes"

SYSTEM_PROMPT = """You are an expert API documentation analyst. Your role is to analyze GitHub Pull Request diffs and identify changes to REST API endpoints.

Key responsibilities:
1. Identify new API routes being added
2. Detect modifications to existing routes (changes in parameters, request/response format, etc.)
3. Find deleted or deprecated routes
4. Extract detailed information about each route including methods, paths, parameters, request/response schemas
5. Provide confidence scores for your analysis

You must use the analyze_api_changes tool to return structured data. Be thorough but precise in your analysis.

Guidelines:
- Look for HTTP route definitions (app.get, router.post, @RequestMapping, etc.)
- Identify request/response payload structures
- Note parameter changes (query params, path params, headers)
- Detect middleware changes that affect API behavior
- Consider both code and documentation changes
- Report paths without any host prefix, starting with a slash (e.g. /api/v1/users)"""

_PARAMETER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Parameter name"},
        "in": {"type": "string", "description": "Parameter location (query, path, header, body)"},
        "type": {"type": "string", "description": "Parameter type (string, number, boolean, etc.)"},
        "required": {"type": "boolean", "description": "Whether parameter is required"},
        "description": {"type": "string", "description": "Parameter description"},
        "example": {"description": "Example value"},
    },
}

_HEADER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Header name"},
        "required": {"type": "boolean", "description": "Whether the header is required"},
        "description": {"type": "string", "description": "Header description"},
        "example": {"description": "Example value"},
    },
}


def _route_schema(description: str, full: bool = True) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "method": {"type": "string", "description": "HTTP method (GET, POST, PUT, DELETE, etc.)"},
        "path": {"type": "string", "description": "API endpoint path (e.g., /api/v1/users)"},
        "description": {"type": "string", "description": description},
    }
    if full:
        properties.update(
            {
                "parameters": {"type": "array", "items": _PARAMETER_SCHEMA},
                "headers": {"type": "array", "items": _HEADER_SCHEMA},
                "request_body": {"type": "object", "description": "Request body schema"},
                "response": {"type": "object", "description": "Response body schema"},
                "tags": {"type": "array", "items": {"type": "string"}},
            }
        )
    return {"type": "object", "properties": properties}


ANALYSIS_TOOL: dict[str, Any] = {
    "name": ANALYSIS_TOOL_NAME,
    "description": (
        "Analyze GitHub Pull Request diffs to identify API route changes and return "
        "structured data about new, modified, or deleted endpoints"
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "new_routes": {
                "type": "array",
                "description": "Array of new API routes found in the PR",
                "items": _route_schema("Description of what this endpoint does"),
            },
            "modified_routes": {
                "type": "array",
                "description": "Array of modified API routes",
                "items": _route_schema("Description of changes made"),
            },
            "deleted_routes": {
                "type": "array",
                "description": "Array of deleted or deprecated API routes",
                "items": _route_schema("Reason for deletion/deprecation", full=False),
            },
            "summary": {
                "type": "string",
                "description": "Brief summary of all API changes found in this PR",
            },
            "confidence": {
                "type": "number",
                "description": "Confidence score between 0 and 1 for the analysis accuracy",
            },
        },
        "required": ["new_routes", "modified_routes", "deleted_routes", "summary", "confidence"],
    },
}


def build_analysis_prompt(
    diff: str,
    existing_routes: Optional[list[ExistingRoute]] = None,
    pull_request: Optional[GitHubPullRequest] = None,
    repository: Optional[GitHubRepository] = None,
) -> str:
    """Build the user prompt for one analysis."""
    sections = [
        "Please analyze the following GitHub Pull Request to identify API changes "
        "and provide a structured response.",
    ]

    if pull_request is not None:
        details = [
            f"- **Title:** {pull_request.title}",
            f"- **Description:** {pull_request.body or ''}",
            f"- **Number:** {pull_request.number}",
        ]
        if repository is not None and repository.full_name:
            details.insert(2, f"- **Repository:** {repository.full_name}")
        sections.append("**Pull Request Details:**\n" + "\n".join(details))

    sections.append(
        "**Analysis Instructions:**\n"
        "1. **New Routes:** include HTTP method, path, description, parameters, "
        "request body and response.\n"
        "2. **Modified Routes:** routes that already exist but whose method, "
        "parameters, request body or response changed.\n"
        "3. **Deleted Routes:** routes removed by this change.\n"
        "4. **Confidence:** a score between 0 and 1 for the analysis accuracy."
    )

    if existing_routes:
        sections.append(
            "**Currently Documented Routes:**\n"
            "Use these to tell new routes from modified ones and reuse their "
            "exact method and path when they change.\n"
            + format_routes_context(existing_routes)
        )

    sections.append(f"**Diff:**\n```diff\n{diff}\n```")
    return "\n\n".join(sections)
