"""
Status channel for FHE vote operations.

One slot, not a queue: each post replaces the previous status. Success
and error statuses clear themselves after a short delay; pending ones
stay until replaced. Meant for a single asyncio loop.

19-10-2026
"""

import asyncio
from typing import Callable

from app.config import STATUS_ERROR_CLEAR_SECONDS, STATUS_SUCCESS_CLEAR_SECONDS
from app.fhevote.model.enums import TransactionStatusEnum
from app.fhevote.model.schemas import TransactionStatus


class StatusChannel(object):

    def __init__(
        self,
        success_clear_seconds: float = STATUS_SUCCESS_CLEAR_SECONDS,
        error_clear_seconds: float = STATUS_ERROR_CLEAR_SECONDS,
    ) -> None:
        self.clear_delays = {
            TransactionStatusEnum.success: success_clear_seconds,
            TransactionStatusEnum.error: error_clear_seconds,
        }
        self._value = TransactionStatus()
        self._clear_handle = None
        self._subscribers = []

    @property
    def value(self) -> TransactionStatus:
        return self._value

    def subscribe(self, callback: Callable[[TransactionStatus], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set(self, value: TransactionStatus):
        self._value = value
        for callback in list(self._subscribers):
            callback(value)

    def _cancel_clear(self):
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None

    def post(self, status: TransactionStatusEnum, message: str) -> TransactionStatus:
        self._cancel_clear()
        self._set(TransactionStatus(visible=True, status=status, message=message))

        delay = self.clear_delays.get(status)
        if delay is not None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # outside a loop there is nothing to schedule the clear on
                loop = None
            if loop is not None:
                self._clear_handle = loop.call_later(delay, self.clear)
        return self._value

    def pending(self, message: str) -> TransactionStatus:
        return self.post(TransactionStatusEnum.pending, message)

    def success(self, message: str) -> TransactionStatus:
        return self.post(TransactionStatusEnum.success, message)

    def error(self, message: str) -> TransactionStatus:
        return self.post(TransactionStatusEnum.error, message)

    def clear(self):
        self._cancel_clear()
        self._set(TransactionStatus())
