"""Camera and microphone session state with explicit error states."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum

logger = logging.getLogger(__name__)


class CaptureDevice(str, Enum):
  CAMERA = "camera"
  MICROPHONE = "microphone"


class DeviceState(str, Enum):
  INACTIVE = "inactive"
  ACTIVE = "active"
  PAUSED = "paused"
  ERROR = "error"


class DeviceStateError(RuntimeError):
  """Raised on a transition the current state does not allow."""


# Browser DOMException names -> message template; `{device}` is the device noun.
_MEDIA_ERROR_DESCRIPTIONS: dict[str, str] = {
  "NotAllowedError": "{Device} permission was denied. Please enable it in your browser settings.",
  "PermissionDeniedError": "{Device} permission was denied. Please enable it in your browser settings.",
  "NotFoundError": "No {device} was found on your device.",
  "DevicesNotFoundError": "No {device} was found on your device.",
  "NotReadableError": "The {device} is already in use or cannot be read (e.g., hardware error).",
  "TrackStartError": "The {device} is already in use or cannot be read (e.g., hardware error).",
  "AbortError": "{Device} access was aborted. This can happen if the page is closed or another process took over the {device}.",
  "OverconstrainedError": "The requested {device} settings (e.g., resolution) are not supported by your {device}.",
  "SecurityError": "{Device} access is blocked by browser security settings (e.g., page not served over HTTPS).",
}


def describe_media_error(error_name: str | None, message: str | None = None, device: CaptureDevice = CaptureDevice.CAMERA) -> str:
  """Return a human-readable description for a browser media error name."""
  noun = device.value
  template = _MEDIA_ERROR_DESCRIPTIONS.get(error_name or "")
  if template is not None:
    return template.format(device=noun, Device=noun.capitalize())
  if message:
    return f"An unexpected error occurred: {message}. Please ensure permissions are granted and the {noun} is available."
  return f"Could not access or initialize the {noun}."


_ALLOWED_TRANSITIONS: dict[DeviceState, set[DeviceState]] = {
  DeviceState.INACTIVE: {DeviceState.ACTIVE, DeviceState.ERROR},
  DeviceState.ACTIVE: {DeviceState.PAUSED, DeviceState.INACTIVE, DeviceState.ERROR},
  DeviceState.PAUSED: {DeviceState.ACTIVE, DeviceState.INACTIVE, DeviceState.ERROR},
  DeviceState.ERROR: {DeviceState.INACTIVE, DeviceState.ACTIVE},
}


class DeviceSession:
  """Acquire/use/release lifecycle for one capture device.

  `acquire` opens the underlying stream and returns a release callable; the
  session guarantees that callable runs exactly once on stop or failure.
  """

  def __init__(self, device: CaptureDevice, acquire: Callable[[], Callable[[], None]]) -> None:
    self.device = device
    self._acquire = acquire
    self._release: Callable[[], None] | None = None
    self.state = DeviceState.INACTIVE
    self.error: str | None = None

  def _transition(self, target: DeviceState) -> None:
    if target not in _ALLOWED_TRANSITIONS[self.state]:
      raise DeviceStateError(f"Cannot move {self.device.value} from {self.state.value} to {target.value}.")
    logger.debug("Device %s %s -> %s", self.device.value, self.state.value, target.value)
    self.state = target

  def _release_stream(self) -> None:
    release, self._release = self._release, None
    if release is not None:
      release()

  def start(self) -> None:
    if self.state == DeviceState.ACTIVE:
      return
    try:
      self._release = self._acquire()
    except Exception as exc:
      self.fail(getattr(exc, "name", type(exc).__name__), str(exc))
      raise
    self.error = None
    self._transition(DeviceState.ACTIVE)

  def pause(self) -> None:
    self._transition(DeviceState.PAUSED)

  def resume(self) -> None:
    if self.state != DeviceState.PAUSED:
      raise DeviceStateError(f"Cannot resume {self.device.value} from {self.state.value}.")
    self._transition(DeviceState.ACTIVE)

  def stop(self) -> None:
    self._release_stream()
    if self.state != DeviceState.INACTIVE:
      self._transition(DeviceState.INACTIVE)

  def fail(self, error_name: str | None, message: str | None = None) -> str:
    """Record a device error, release the stream and return its description."""
    self._release_stream()
    self.error = describe_media_error(error_name, message, self.device)
    self.state = DeviceState.ERROR
    logger.warning("Device %s failed error_name=%s", self.device.value, error_name)
    return self.error

  @contextmanager
  def session(self) -> Iterator[DeviceSession]:
    """Start the device and always release it when the block exits."""
    self.start()
    try:
      yield self
    finally:
      self.stop()
