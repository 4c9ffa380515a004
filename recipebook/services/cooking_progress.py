# recipebook/services/cooking_progress.py
from ..errors import ValidationError
from ..utils.clock import utcnow

SESSION_KEY = 'cooking_progress'
DEFAULT_LIMIT = 10


def _now():
    return utcnow().isoformat()


def progress_key(ref, multiplier):
    return f"{ref.key()}-x{multiplier:g}"


class CookingProgressStore:
    """
    Cooking-mode progress for one user within one browser session.

    Lives in the signed session cookie and is never written to the database.
    Entries are namespaced by user id, so another account using the same
    cookie never sees them. Holds at most `limit` recipes per user; saving
    another evicts the least recently updated one.
    """

    def __init__(self, session, user_id, limit=DEFAULT_LIMIT):
        self.session = session
        self.user_key = str(user_id)
        self.limit = max(1, int(limit))

    def _entries(self, create=False):
        if create:
            return self.session.setdefault(SESSION_KEY, {}).setdefault(self.user_key, {})
        return self.session.get(SESSION_KEY, {}).get(self.user_key, {})

    def get(self, ref, multiplier=1):
        entry = self._entries().get(progress_key(ref, multiplier))
        if entry:
            return entry
        now = _now()
        return {
            'currentStep': 0,
            'completedSteps': {},
            'checkedIngredients': {},
            'servingMultiplier': multiplier,
            'startTime': now,
            'lastUpdated': now,
        }

    def save(self, ref, multiplier, data):
        current_step = data.get('currentStep')
        if isinstance(current_step, bool) or not isinstance(current_step, int) or current_step < 0:
            raise ValidationError("Invalid currentStep")

        completed = data.get('completedSteps') or {}
        checked = data.get('checkedIngredients') or {}
        if not isinstance(completed, dict) or not isinstance(checked, dict):
            raise ValidationError("completedSteps and checkedIngredients must be objects")

        entries = self._entries(create=True)
        key = progress_key(ref, multiplier)
        existing = entries.get(key, {})
        now = _now()
        entries[key] = {
            'currentStep': current_step,
            'completedSteps': {str(k): bool(v) for k, v in completed.items()},
            'checkedIngredients': {str(k): bool(v) for k, v in checked.items()},
            'servingMultiplier': multiplier,
            'startTime': existing.get('startTime') or now,
            'lastUpdated': now,
        }

        while len(entries) > self.limit:
            oldest = min((k for k in entries if k != key), key=lambda k: entries[k].get('lastUpdated', ''))
            del entries[oldest]

        self.session.modified = True
        return entries[key]

    def clear(self, ref, multiplier=1):
        entries = self._entries()
        if entries.pop(progress_key(ref, multiplier), None) is not None:
            self.session.modified = True
