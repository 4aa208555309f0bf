from typing import List, Optional

system_prompt = """You are an expert web developer who generates clean, modern Next.js websites.
You always answer with a single valid JSON object and nothing else."""

prompt = """<role>
You are an AI web designer. You turn a short natural-language description into a small multi-page website.
</role>

<description>
{DESCRIPTION}
</description>
{REQUIREMENTS}

<output_format>
CRITICAL: You MUST respond with ONLY valid JSON. No markdown fences, no text before or after the JSON.

The JSON must have exactly this structure:
{
  "pages": {
    "index": "() => { return (<div>...home page JSX...</div>); }",
    "about": "() => { return (<div>...about page JSX...</div>); }",
    "contact": "() => { return (<div>...contact page JSX...</div>); }"
  },
  "components": {
    "Navbar": "() => { return (<nav>...</nav>); }"
  },
  "styles": "/* Global CSS styles */"
}

- "pages" is REQUIRED and MUST contain an "index" page (the home page). Add other pages only when the description calls for them.
- "components" is OPTIONAL: shared pieces such as a navbar or footer.
- "styles" is REQUIRED: global CSS as a single string (may be empty).
</output_format>

<editing_rules>
- EVERY editable text element (headings, paragraphs, buttons, links, list items, labels) MUST carry a data-edit-id attribute.
- Each data-edit-id value MUST be unique within the website and stable, e.g. data-edit-id='hero-title', data-edit-id='about-intro'.
- Put the data-edit-id on the element that directly contains the text, not on a wrapper.
</editing_rules>

<navigation_rules>
- Internal navigation MUST NOT use href targets.
- Every link or button that switches page MUST carry a data-nav-target attribute naming the destination page key, e.g. data-nav-target='about'.
- Use data-nav-target='index' for the home page.
</navigation_rules>

<formatting_rules>
- Every markup string MUST be on a SINGLE LINE. Never put raw newlines inside a JSON string.
- Use single quotes for JSX attribute values so no double quote ever appears inside a JSON string.
- If a double quote or backslash is unavoidable inside a string, escape it as \\" or \\\\.
- Write pure JSX functions: no imports, no exports, no 'export default'.
- Use Tailwind CSS classes for styling and make every page responsive.
- Focus on a clean, professional design with good UX.
</formatting_rules>
"""


def build_prompts(
    description: str,
    pages: Optional[List[str]] = None,
    style: Optional[str] = None,
) -> tuple[str, str]:
    """Return the (system, user) prompt pair for a website description"""
    requirements = []
    keys = ["index"]
    for page in pages or []:
        key = page.strip().lower()
        if key == "home":
            key = "index"
        if key and key not in keys:
            keys.append(key)
    if len(keys) > 1:
        requirements.append(f"- Generate exactly these page keys: {', '.join(keys)}.")
    if style:
        requirements.append(f"- Use a {style.strip()} visual style throughout.")
    if requirements:
        requirements_block = "\n<requirements>\n" + "\n".join(requirements) + "\n</requirements>\n"
    else:
        requirements_block = ""

    # replace() instead of format(): the template is full of literal braces
    user_prompt = prompt.replace("{DESCRIPTION}", description.strip()).replace(
        "{REQUIREMENTS}", requirements_block
    )
    return system_prompt, user_prompt
