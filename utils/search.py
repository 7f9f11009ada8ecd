import re
from typing import Iterable, Optional
from core.exceptions import ValidationError

def build_search_filter(query: Optional[str], fields: Iterable[str]) -> dict:
    """
    Case-insensitive substring match on any of the given fields.
    The query is matched literally, regex metacharacters are escaped.
    """
    if query is None or not query.strip():
        raise ValidationError("Search query is required", errors=[{"field": "query", "message": "Search query is required"}])
    pattern = re.escape(query.strip())
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields]}
