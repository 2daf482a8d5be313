import html

import bleach


def clean_text(v) -> str:
    """Plain text from user input: every tag stripped, entities decoded.

    Values are stored as plain text and escaped by whatever renders them.
    """
    return html.unescape(bleach.clean((v or '').strip(), tags=set(), strip=True)).strip()
