from dataclasses import replace
from typing import List, Mapping, Sequence

from ..errors import InvalidArgument
from ..models.data_models import COUNTER_FIELDS, UrlMetadata


def merge_counts(
    hits: Sequence[UrlMetadata],
    counts: Mapping[str, int],
    target_field: str,
) -> List[UrlMetadata]:
    """
    url → count 딕셔너리 값을 각 hit 의 target_field 에 복사한 새 리스트를 반환.
    딕셔너리에 없는 url 은 0. 순서 / 길이는 그대로, 입력 hit 은 수정하지 않음.
    """
    if target_field not in COUNTER_FIELDS:
        raise InvalidArgument(f"Unknown counter field: {target_field}")
    return [replace(h, **{target_field: counts.get(h.url, 0)}) for h in hits]
