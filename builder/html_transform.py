"""
HTML transform - dev index.html in, production index.html out.

Plain text rewriting, no parse tree:
1. Pull the inline text/babel script out (it gets bundled separately)
2. Apply the rewrite rules in order, each on the previous result

Rules are first-match, case-sensitive. A rule whose target is
missing does nothing; we only report it.
"""

from typing import List, Optional

from errors import MalformedDocument
from models import (
    BuildConfig, RewriteRule, TransformResult,
    DELETE_PATTERN, REPLACE, INSERT_BEFORE,
)


SCRIPT_OPEN = '<script type="text/babel">'
SCRIPT_CLOSE = '</script>'
INLINE_SCRIPT_PATTERN = r'<script type="text/babel">[\s\S]*?</script>'

TRANSPILER_TAG = '<script src="vendors/babel.min.js"></script>'
FRAMEWORK_TAG = '<script src="vendors/react-with-dom.js"></script>'
FONT_SOURCE_HREF = 'href="assets/{font}"'

# Indent used by injected tags, keeps the output readable
INDENT = "\n       "


def extract(document: str) -> str:
    """
    Return the trimmed body of the first inline text/babel script.

    Raises MalformedDocument when the opening marker or the
    closing tag after it is missing.
    """
    open_at = document.find(SCRIPT_OPEN)
    if open_at == -1:
        raise MalformedDocument(f"No {SCRIPT_OPEN} block found in document")

    start = open_at + len(SCRIPT_OPEN)
    end = document.find(SCRIPT_CLOSE, start)
    if end == -1:
        raise MalformedDocument(
            f"{SCRIPT_OPEN} block at offset {open_at} is never closed"
        )

    return document[start:end].strip()


def cdn_script_tags(config: BuildConfig) -> str:
    """Production React + ReactDOM from the CDN, pinned version"""
    base = config.cdn_base.rstrip("/")
    version = config.framework_version
    react = f'<script src="{base}/react@{version}/umd/react.production.min.js"></script>'
    react_dom = f'<script src="{base}/react-dom@{version}/umd/react-dom.production.min.js"></script>'
    return react + INDENT + react_dom


def preload_tags(config: BuildConfig) -> str:
    """Preload hints for the bundle, the main stylesheet and the font"""
    return "".join([
        f'{INDENT}<link rel="preload" href="./{config.script_output}" as="script">',
        f'{INDENT}<link rel="preload" href="./{config.primary_style_output}" as="style">',
        f'{INDENT}<link rel="preload" href="./{config.font_file}" as="font" crossorigin>',
    ])


def build_rules(config: Optional[BuildConfig] = None) -> List[RewriteRule]:
    """The rewrite rules, in the order they must run"""
    config = config or BuildConfig()

    rules = [
        RewriteRule("remove-inline-script", DELETE_PATTERN, INLINE_SCRIPT_PATTERN, ""),
        RewriteRule("remove-transpiler", REPLACE, TRANSPILER_TAG, ""),
        RewriteRule("framework-from-cdn", REPLACE, FRAMEWORK_TAG, cdn_script_tags(config)),
        # Hints follow </title> directly, so <title>X</title> stays intact
        RewriteRule("preload-hints", REPLACE, "</title>", "</title>" + preload_tags(config)),
        RewriteRule(
            "bundle-script", INSERT_BEFORE, "</body>",
            f'<script src="./{config.script_output}"></script>',
        ),
    ]

    # One rewrite per stylesheet, in style_entries order (reset.css first by default)
    for source, minified in config.style_entries.items():
        rules.append(RewriteRule(
            f"minified-{source}", REPLACE,
            f'href="{source}"', f'href="./{minified}"',
        ))

    rules.append(RewriteRule(
        "font-path", REPLACE,
        FONT_SOURCE_HREF.format(font=config.font_file),
        f'href="./{config.font_file}"',
    ))
    return rules


def transform(document: str, rules: Optional[List[RewriteRule]] = None) -> str:
    """Apply every rule in order and return the production document"""
    if rules is None:
        rules = build_rules()
    for rule in rules:
        document = rule.apply(document)
    return document


def missing_anchors(document: str, rules: Optional[List[RewriteRule]] = None) -> List[str]:
    """
    Names of the rules that had nothing to act on.
    Each rule is checked against the text it actually receives.
    """
    if rules is None:
        rules = build_rules()
    missing = []
    for rule in rules:
        if not rule.matches(document):
            missing.append(rule.name)
            continue
        document = rule.apply(document)
    return missing


def process(document: str, rules: Optional[List[RewriteRule]] = None) -> TransformResult:
    """Extract the payload, then rewrite the same source document"""
    if rules is None:
        rules = build_rules()
    payload = extract(document)
    return TransformResult(
        payload=payload,
        document=transform(document, rules),
        missing_anchors=missing_anchors(document, rules),
    )
