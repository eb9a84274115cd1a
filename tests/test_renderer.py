from marsrover.core import navigation, renderer


def test_render_frame_shape(state, world):
    state.lidar = {"visible": True, "color": navigation.COLOR_RED, "start": (0, 0, 0), "end": (5, 0, -5)}
    state.trigger_emergency_stop()
    frame = renderer.render_frame(state, world)
    assert frame.shape == (renderer.VIEW_SIZE, renderer.VIEW_SIZE, 3)
    assert frame.dtype.name == "uint8"


def test_jpeg_encoding(state, world):
    data = renderer.encode_jpeg(renderer.render_frame(state, world))
    assert data[:2] == b"\xff\xd8"


def test_to_pixel_centres_the_rover():
    c = renderer.VIEW_SIZE // 2
    assert renderer.to_pixel((3.0, -2.0), 3.0, -2.0) == (c, c)
    assert renderer.to_pixel((0.0, 0.0), 1.0, 0.0) == (c + int(renderer.SCALE), c)


def test_hex_to_bgr():
    assert renderer.hex_to_bgr(0xEF4444) == (0x44, 0x44, 0xEF)
