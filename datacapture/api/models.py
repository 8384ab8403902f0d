from __future__ import annotations

from pydantic import Field, StrictStr

from datacapture.schema.extraction import CamelModel
from datacapture.services.capture_devices import CaptureDevice, DeviceState


class TextQueryRequest(CamelModel):
  query: StrictStr = Field(default="", description="Typed or dictated query; blank queries are ignored.")


class DataUriRequest(CamelModel):
  data_uri: StrictStr = Field(description="Captured media as 'data:<mimetype>;base64,<encoded_data>'.")


class DeviceErrorRequest(CamelModel):
  device: CaptureDevice = CaptureDevice.CAMERA
  error_name: StrictStr | None = Field(default=None, description="Browser error name, e.g. 'NotAllowedError'.")
  message: StrictStr | None = None


class DeviceErrorResponse(CamelModel):
  device: CaptureDevice
  state: DeviceState
  description: str
