import math
import re

# first integer or decimal number in an ingredient line
QUANTITY_PATTERN = re.compile(r'\d+(?:\.\d+)?')


def scale_quantity(text, multiplier):
    """
    Multiply the first number found in `text`, keeping everything around it.

    >>> scale_quantity("2 cups Flour", 2)
    '4.0 cups Flour'
    """
    match = QUANTITY_PATTERN.search(text)
    if not match:
        return text
    scaled = float(match.group(0)) * multiplier
    return f"{text[:match.start()]}{scaled:.1f}{text[match.end():]}"


def scale_servings(servings, multiplier):
    if servings is None:
        return None
    # half-up, so 2.5 servings becomes 3
    return int(math.floor(servings * multiplier + 0.5))
