"""
Parsing Service

Functions for parsing free-text ingredient lines and fractions from recipe data.
Amounts and units come out as display strings; nothing is converted.
"""

import re
from constants import UNIT_MAPPINGS, UNICODE_FRACTIONS, COMMON_FRACTIONS

# Comma suffixes that are preparation notes rather than part of the name
NOTE_KEYWORDS = {
    'optional', 'divided', 'or more', 'or less', 'to taste',
    'for serving', 'for garnish', 'at room temp', 'softened',
    'melted', 'chopped', 'diced', 'minced', 'sliced', 'cubed',
    'sifted', 'packed', 'beaten', 'room temperature', 'thawed',
    'drained', 'rinsed', 'peeled', 'seeded', 'cored', 'trimmed',
    'cut into', 'plus more', 'as needed', 'torn', 'shredded'
}


def float_to_fraction(value):
    """Convert float to fraction string for display."""
    if value is None or value == 0:
        return '0'
    # Check if it's a whole number
    if value == int(value):
        return str(int(value))
    # Split into whole and decimal parts
    whole = int(value)
    decimal = value - whole
    # Check common fractions (with tolerance)
    for dec, frac in COMMON_FRACTIONS.items():
        if abs(decimal - dec) < 0.02:
            if whole > 0:
                return f"{whole} {frac}"
            return frac
    # Fall back to decimal
    return f"{value:.2f}".rstrip('0').rstrip('.')


def normalize_fractions(text):
    """Replace Unicode fraction characters with ASCII fractions ("1½" -> "1 1/2")."""
    # First, normalize all whitespace (including non-breaking spaces) to regular spaces
    text = re.sub(r'[\s\u00a0\u2000-\u200b]+', ' ', text)

    for char, value in UNICODE_FRACTIONS.items():
        if char in text:
            # Check if preceded by a number (mixed fraction like "1½" or "1 ½")
            pattern = r'(\d+)\s*' + re.escape(char)
            match = re.search(pattern, text)
            if match:
                whole = float(match.group(1))
                replacement = float_to_fraction(whole + value)
                text = re.sub(pattern, replacement, text)
            else:
                text = text.replace(char, float_to_fraction(value))
    return text


def parse_ingredient_line(text):
    """
    Parse ingredient text like '2 cups flour, sifted' into a dict with
    name, amount, unit and notes. Returns None for blank input.

    '2 cups flour'     -> {'amount': '2', 'unit': 'cup', 'name': 'flour'}
    '1 onion'          -> {'amount': '1', 'unit': '', 'name': 'onion'}
    'salt, to taste'   -> {'amount': '', 'unit': '', 'name': 'salt', 'notes': 'to taste'}
    """
    text = (text or '').strip()
    if not text:
        return None

    # Normalize Unicode fractions first (e.g., ½ → 1/2, 1½ → 1 1/2)
    text = normalize_fractions(text)

    notes = []

    # Bracketed content is a note: "1 can (400 ml) tomatoes"
    for match in re.findall(r'\(([^)]*)\)', text):
        if match.strip():
            notes.append(match.strip())
    text = re.sub(r'\s*\([^)]*\)', '', text)

    # Only treat comma content as a note if it contains a note keyword
    # Keep commas that are part of the ingredient name like "boneless, skinless"
    comma_match = re.search(r',\s*(.*)$', text)
    if comma_match:
        after_comma = comma_match.group(1).strip()
        if any(keyword in after_comma.lower() for keyword in NOTE_KEYWORDS):
            notes.append(after_comma)
            text = text[:comma_match.start()]

    # Extract quantity - order matters! Mixed fractions first, then simple fractions, then numbers
    qty_pattern = r'^(\d+\s+\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+\.?\d*)\s*'
    qty_match = re.match(qty_pattern, text)

    amount = ''
    if qty_match:
        amount = re.sub(r'\s*/\s*', '/', qty_match.group(1).strip())
        text = text[qty_match.end():].strip()

    # Try to extract unit
    unit = ''
    words = text.split()
    if amount and len(words) > 1:
        first_word = words[0].lower().rstrip('.')
        if first_word in UNIT_MAPPINGS:
            unit = UNIT_MAPPINGS[first_word]
            text = ' '.join(words[1:])

    name = re.sub(r'\s+', ' ', text).strip(' ,')
    if not name:
        return None

    return {
        'name': name,
        'amount': amount,
        'unit': unit,
        'notes': '; '.join(notes),
    }
