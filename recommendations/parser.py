import re

# "**Title (YYYY)**" or plain "Title (YYYY)". The bold form is tried first so
# it wins whenever both alternatives could match at the same position.
# Titles that themselves contain parentheses before the year are not
# special-cased and may be split at the wrong spot.
TITLE_PATTERN = re.compile(r'\*\*([^*]+)\s\((\d{4})\)\*\*|([^*\n]+)\s\((\d{4})\)')


def extract_titles(text):
    """
    Returns the movie titles found in free text, in order of appearance.
    Duplicates are kept; the year is dropped.
    """
    titles = []
    for match in TITLE_PATTERN.finditer(text or ''):
        title = (match.group(1) or match.group(3)).strip()
        titles.append(title)
    return titles
