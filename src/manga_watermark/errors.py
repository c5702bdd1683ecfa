"""Exception types raised by the watermark and mask engines."""


class WatermarkError(Exception):
    pass


class BitmapDecodeError(WatermarkError):
    """An encoded image payload could not be decoded into a bitmap."""


class SurfaceUnavailableError(WatermarkError):
    """No drawing surface could be created for the requested size."""


class MaskEditorClosedError(WatermarkError):
    pass


class SettingsLoadError(WatermarkError):
    pass
