from segstudio.imaging.pixel_buffer import CHANNELS, PixelBuffer

__all__ = ["CHANNELS", "PixelBuffer"]
