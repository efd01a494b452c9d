"""
System prompts and templates for scenario generation.
"""

from testpilot.core.types import SupportedAction

ACTION_NAMES = ", ".join(action.value for action in SupportedAction)

# Per-action guidance for the target and description fields
ACTION_INSTRUCTIONS = {
    SupportedAction.CLICK: ("CSS selector of the element to click", "Click on the login button"),
    SupportedAction.DBLCLICK: ("CSS selector of the element to double-click", "Double click the edit icon"),
    SupportedAction.TYPE: (
        "CSS selector of the input field",
        "MUST contain the text in quotes: Type 'user@example.com' into the email field",
    ),
    SupportedAction.FILL: (
        "CSS selector of the input field",
        "MUST contain the text in quotes: Fill username field with 'testUser'",
    ),
    SupportedAction.NAVIGATE: ("Full URL to open", "Navigate to the pricing page"),
    SupportedAction.PRESS: ("Key name such as Enter, Escape, Tab or ArrowDown", "Press the Enter key"),
    SupportedAction.CHECK: ("CSS selector of a checkbox or radio button", "Check the 'Remember me' checkbox"),
    SupportedAction.UNCHECK: ("CSS selector of a checkbox", "Uncheck the newsletter checkbox"),
    SupportedAction.HOVER: ("CSS selector of the element to hover", "Hover over the user menu"),
    SupportedAction.SELECT_OPTION: (
        "CSS selector of the <select> element",
        "MUST contain the option value or label in quotes: Select option 'USA' from the country list",
    ),
    SupportedAction.FOCUS: ("CSS selector of the element to focus", "Focus on the search input"),
    SupportedAction.RELOAD: ("Empty string", "Reload the current page"),
    SupportedAction.GO_BACK: ("Empty string", "Navigate to the previous page in history"),
    SupportedAction.GO_FORWARD: ("Empty string", "Navigate to the next page in history"),
    SupportedAction.WAIT_FOR_TIMEOUT: ("Duration in milliseconds, e.g. \"1000\"", "Wait for 1 second"),
    SupportedAction.WAIT_FOR_SELECTOR: (
        "CSS selector of the element to wait for",
        "Wait for the results container to appear",
    ),
    SupportedAction.ACCEPT_DIALOG: (
        "Empty string",
        "Accept the next dialog. Place this BEFORE the step that opens the dialog",
    ),
    SupportedAction.DISMISS_DIALOG: (
        "Empty string",
        "Dismiss the next dialog. Place this BEFORE the step that opens the dialog",
    ),
    SupportedAction.SCROLL_TO_BOTTOM: ("Empty string", "Scroll to the bottom of the page"),
    SupportedAction.SCROLL_TO_TOP: ("Empty string", "Scroll to the top of the page"),
    SupportedAction.SCROLL_TO_ELEMENT: ("CSS selector of the element", "Scroll to the footer section"),
    SupportedAction.SET_VIEWPORT: ("Dimensions as WIDTHxHEIGHT, e.g. \"1280x720\"", "Set viewport to 1280x720"),
    SupportedAction.CHECK_VISIBILITY: (
        "CSS selector of the element",
        "Check visibility of the success message (asserts the element is visible)",
    ),
    SupportedAction.CHECK_TEXT: (
        "CSS selector of the element",
        "MUST contain the expected text in quotes: Check text 'Welcome user' in the greeting",
    ),
    SupportedAction.CHECK_URL: (
        "Substring the current URL must contain",
        "Check URL contains '/dashboard'",
    ),
}


def _render_action_instructions() -> str:
    lines = []
    for action, (target, description) in ACTION_INSTRUCTIONS.items():
        lines.append(f"- '{action.value}':")
        lines.append(f"    - target: {target}")
        lines.append(f"    - description: {description}")
    return "\n".join(lines)


SCENARIO_GENERATOR_SYSTEM_PROMPT = f"""You are a test scenario generator for web applications. You receive a page URL and its DOM and propose scenarios that an automated Playwright executor will run step by step.

Your role is to:
1. Identify distinct user flows or features visible in the DOM
2. Propose 3-5 scenarios, each with a name, a short description and an ordered list of test steps
3. Cover interactive elements, realistic user flows, edge cases and negative cases such as submitting a form with invalid data

When a scenario navigates to another page, assume the navigation succeeded and continue the same scenario with 2-4 plausible steps for the destination page, inferred from the link or button that led there and common patterns for that kind of page.

Every step MUST have an 'action', a 'target', a 'description' and a 'confidence' between 0 and 1.
The 'action' MUST be one of: {ACTION_NAMES}.

Action-specific rules for 'target' and 'description':
{_render_action_instructions()}

Quoted values in descriptions are read literally by the executor; always quote the exact text to type, select or check.
For actions without a target use an empty string.

Respond with a JSON object of the form:
{{
  "scenarios": [
    {{
      "name": "User Login",
      "description": "Logs in with valid credentials",
      "testSteps": [
        {{"action": "fill", "target": "#email", "description": "Fill email field with 'user@example.com'", "confidence": 0.9}}
      ]
    }}
  ]
}}"""


def build_generation_message(url: str, dom_content: str) -> str:
    """User message carrying the page under test."""
    return f"URL: {url}\n\nDOM Content:\n{dom_content}"
