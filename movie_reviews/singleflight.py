# ------------------------------------------------------------
# singleflight.py — 동일한 요청의 동시 실행을 하나로 합치기
# ------------------------------------------------------------
# 같은 키(요청 URL)로 동시에 들어온 조회 요청은 한 번만 실행하고
# 그 결과(또는 예외)를 기다리던 모든 요청에 나눠준다.
# 결과를 캐시하지는 않는다: 실행이 끝나면 키는 바로 제거된다.

import threading
from typing import Any, Callable, Dict, Optional, Tuple


class _Call:
    def __init__(self):
        self.done = threading.Event()
        self.result: Any = None
        self.error: Optional[BaseException] = None
        self.dups = 0


class SingleFlight:
    def __init__(self):
        self._lock = threading.Lock()
        self._calls: Dict[str, _Call] = {}

    def do(self, key: str, fn: Callable[[], Any]) -> Tuple[Any, bool]:
        """fn()의 결과와 공유 여부(다른 요청과 결과를 나눠 받았는지)를 반환"""
        with self._lock:
            call = self._calls.get(key)
            if call is not None:
                call.dups += 1
                leader = False
            else:
                call = _Call()
                self._calls[key] = call
                leader = True

        if not leader:
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.result, True

        try:
            call.result = fn()
        except BaseException as exc:
            call.error = exc
            raise
        finally:
            with self._lock:
                del self._calls[key]
            call.done.set()
        return call.result, call.dups > 0
