# ------------------------------------------------------------
# reconcile.py — 연결(관계) 행 diff/적용 알고리즘
# ------------------------------------------------------------
# 현재(current) 관계 목록을 원하는(desired) 목록으로 바꾸기 위한
# 최소한의 추가/삭제 연산을 계산하고 적용한다.
# 영화-장르, 영화-인물(크레딧) 두 연결 테이블이 같은 함수를 사용한다.

from typing import Any, Callable, Hashable, Iterable, List, Tuple, TypeVar

R = TypeVar("R")


def identity_key(relation: Any) -> Hashable:
    # 관계 행이 제공하는 식별자 (예: (movie_id, genre_id))
    return relation.key()


def diff_relations(
    current: Iterable[R],
    desired: Iterable[R],
    key: Callable[[R], Hashable] = identity_key,
) -> Tuple[List[R], List[R]]:
    """
    (추가할 행, 삭제할 행) 목록을 반환한다.

    - desired의 키가 current에 있으면 그대로 유지(DB 연산 없음)
    - current에만 남은 행은 삭제 대상
    - current에 없던 desired 행은 추가 대상
    - desired 안에서 같은 키가 반복되면 첫 번째 행만 사용

    key가 비교하는 값만 본다. order_no/details 변경까지 감지하려면
    그 값들을 포함한 키를 넘겨야 한다.
    """
    remaining = {key(r): r for r in current}
    to_add: List[R] = []
    seen = set()
    for rel in desired:
        k = key(rel)
        if k in seen:
            continue
        seen.add(k)
        if k in remaining:
            del remaining[k]
        else:
            to_add.append(rel)
    return to_add, list(remaining.values())


def apply_relations(
    current: Iterable[R],
    desired: Iterable[R],
    add: Callable[[R], None],
    remove: Callable[[R], None],
    key: Callable[[R], Hashable] = identity_key,
) -> None:
    """
    diff 결과를 적용한다: 삭제를 모두 수행한 뒤 추가를 수행.
    add/remove 중 하나라도 실패하면 예외가 그대로 전파되므로
    호출자는 반드시 트랜잭션 안에서 호출해야 한다.
    """
    to_add, to_remove = diff_relations(current, desired, key)
    for rel in to_remove:
        remove(rel)
    for rel in to_add:
        add(rel)
