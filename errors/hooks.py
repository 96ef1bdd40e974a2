"""
Global Error Hooks

처리되지 않은 예외와 연결 상태 변화를 오류 핸들러로 전달
"""

import asyncio
import os
import sys
import threading
import traceback
from typing import Any, Callable, Dict, List, Optional, Set

from core.logging_config import setup_logger
from errors.models import ErrorCategory

logger = setup_logger(__name__)


class ConnectivityMonitor:
    """
    네트워크 연결 상태

    호스트 애플리케이션이 set_online으로 상태를 알려줍니다.
    상태가 바뀔 때만 리스너가 호출됩니다.
    """

    def __init__(self, online: bool = True):
        self._online = online
        self._listeners: List[Callable[[bool], Any]] = []

    @property
    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: Callable[[bool], Any]):
        self._listeners.append(listener)

    def set_online(self, online: bool) -> bool:
        """
        연결 상태 갱신

        Returns:
            상태 전환 여부
        """
        online = bool(online)
        if online == self._online:
            return False

        self._online = online
        for listener in list(self._listeners):
            try:
                listener(online)
            except Exception as e:
                logger.error(f"Connectivity listener failed: {e}")
        return True


def _frame_metadata(tb) -> Dict[str, Any]:
    """가장 안쪽 프레임의 파일/라인 정보"""
    if tb is None:
        return {}
    frame = traceback.extract_tb(tb)[-1]
    return {
        "filename": os.path.basename(frame.filename),
        "lineno": frame.lineno,
        "function": frame.name,
    }


class GlobalErrorHooks:
    """
    전역 훅 설치기

    sys.excepthook, threading.excepthook, asyncio 루프 예외 핸들러를
    가로채 handle_error로 보낸 뒤 기존 훅을 그대로 호출합니다.
    """

    def __init__(self, handler):
        self.handler = handler
        self._installed = False
        self._prev_excepthook = None
        self._prev_threading_excepthook = None
        self._loops: Dict[asyncio.AbstractEventLoop, Optional[Callable]] = {}
        self._tasks: Set[asyncio.Task] = set()

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self):
        """훅 설치 (한 번만)"""
        if self._installed:
            return

        self._prev_excepthook = sys.excepthook
        sys.excepthook = self._excepthook

        self._prev_threading_excepthook = threading.excepthook
        threading.excepthook = self._threading_excepthook

        try:
            self.install_loop(asyncio.get_running_loop())
        except RuntimeError:
            pass

        self._installed = True
        logger.info("Global error handlers configured")

    def install_loop(self, loop: asyncio.AbstractEventLoop):
        """asyncio 루프 예외 핸들러 설치"""
        if loop in self._loops:
            return
        self._loops[loop] = loop.get_exception_handler()
        loop.set_exception_handler(self._loop_exception_handler)

    def uninstall(self):
        """기존 훅 복원"""
        if not self._installed:
            return

        if sys.excepthook == self._excepthook:
            sys.excepthook = self._prev_excepthook
        if threading.excepthook == self._threading_excepthook:
            threading.excepthook = self._prev_threading_excepthook
        for loop, previous in self._loops.items():
            if not loop.is_closed():
                loop.set_exception_handler(previous)
        self._loops.clear()
        self._installed = False

    # ===== 훅 =====

    def _excepthook(self, exc_type, exc_value, exc_tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            self.report(exc_value, "unhandled_error", _frame_metadata(exc_tb))
        self._prev_excepthook(exc_type, exc_value, exc_tb)

    def _threading_excepthook(self, args):
        if args.exc_type is not SystemExit:
            error = args.exc_value if args.exc_value is not None else args.exc_type()
            metadata = _frame_metadata(args.exc_traceback)
            if args.thread is not None:
                metadata["thread"] = args.thread.name
            self.report(error, "unhandled_error", metadata)
        self._prev_threading_excepthook(args)

    def _loop_exception_handler(self, loop, context: Dict[str, Any]):
        error = context.get("exception")
        if error is None:
            error = Exception(context.get("message", "Unhandled asyncio error"))
        self.report(
            error,
            "unhandled_promise_rejection",
            {"message": context.get("message")},
            loop=loop,
        )

        previous = self._loops.get(loop)
        if previous is not None:
            previous(loop, context)
        else:
            loop.default_exception_handler(context)

    # ===== 전달 =====

    def report(
        self,
        error: BaseException,
        action: str,
        metadata: Optional[Dict[str, Any]] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """처리되지 않은 오류를 핸들러로 전달"""
        coro = self.handler.handle_error(
            error,
            {"component": "Global", "action": action, "metadata": metadata or {}},
            category=ErrorCategory.SYSTEM,
        )
        return self.schedule(coro, loop)

    def schedule(self, coro, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        동기 훅에서 코루틴 실행

        실행 중인 루프가 있으면 태스크로 예약하고, 없으면 asyncio.run으로
        끝까지 실행합니다.
        """
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None

        if loop is not None and not loop.is_closed():
            task = loop.create_task(coro)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return task

        return asyncio.run(coro)
