"""
Constants for the enrichment guardrails.

Centralized so the input and output guardrails share one list of patterns.
"""

import re

# Patterns that might indicate injection attempts in a resolved prompt
SUSPICIOUS_PATTERNS = [
    r"<script",
    r"javascript:",
    r"on\w+\s*=",
    r"\{\{.*\}\}",
    r"\$\{.*\}",
    r"eval\s*\(",
    r"__proto__",
]

# Longest prompt the enrichment agent accepts, in characters
MAX_PROMPT_LENGTH = 20000

# Markdown code fence some models wrap JSON answers in
CODE_FENCE_PATTERN = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)
