from kivymd.uix.screen import MDScreen
from kivy.clock import Clock
from kivy.core.window import Window

import app_config
from diag import log, vlog
from playback import MediaKind
from player_controller import PlayerController, ControlsLayout
from player_view import SeekBarBinding, apply_layout_to


def _android_backend():
    import media_android as ma
    return ma.AndroidMediaBackend()


class PlayerScreen(MDScreen):
    """Picker buttons, audio transport row and the native video area."""

    def __init__(self, backend_factory=_android_backend, **kw):
        self._backend_factory = backend_factory
        self.backend = None
        self.controller = None
        self.seek_bar = None
        super().__init__(**kw)

    # ==================== lifecycle ====================

    def on_kv_post(self, base_widget):
        super().on_kv_post(base_widget)
        self.backend = self._backend_factory()
        self.controller = PlayerController(self, self.backend, Clock)
        self.seek_bar = SeekBarBinding(self.controller)
        self.apply_layout(ControlsLayout.NEUTRAL)
        self.ids.video_area.bind(pos=self._align_video_to_area, size=self._align_video_to_area)

    def on_pre_enter(self):
        Clock.schedule_once(self._align_video_to_area, 0.3)

    def teardown(self):
        if self.controller is not None:
            self.controller.close()
        if self.backend is not None:
            self.backend.shutdown()

    def _align_video_to_area(self, *args):
        """Moves the native VideoView over the `video_area` placeholder."""
        area = self.ids.get("video_area")
        if area is None or self.backend is None:
            return
        win_w, win_h = Window.size
        if win_w <= 0 or win_h <= 0:
            return

        wx, wy = area.to_window(area.x, area.y, relative=False)
        screen_w, screen_h = self.backend.video_overlay.screen_size_px()

        left_px = int(wx / float(win_w) * screen_w)
        bottom_px = int(wy / float(win_h) * screen_h)
        width_px = int(area.width / float(win_w) * screen_w)
        height_px = int(area.height / float(win_h) * screen_h)
        top_px = int(screen_h - bottom_px - height_px)

        self.backend.video_overlay.set_bounds(left_px, top_px, width_px, height_px)

    # ==================== widget events ====================

    def select_audio(self, *a):
        self.controller.select_file(MediaKind.AUDIO)

    def select_video(self, *a):
        self.controller.select_file(MediaKind.VIDEO)

    def toggle_pause_resume(self, *a):
        self.controller.toggle_pause_resume()

    def stop_audio(self, *a):
        self.controller.stop()

    def on_slider_touch_down(self, slider, touch):
        if self.seek_bar is not None:
            self.seek_bar.touch_down(slider, touch)

    def on_slider_touch_up(self, slider, touch):
        if self.seek_bar is not None:
            self.seek_bar.touch_up(slider, touch)

    def on_slider_value(self, slider, value):
        if self.seek_bar is not None:
            self.seek_bar.value_changed(slider, value)

    # ==================== view ====================

    def apply_layout(self, layout: ControlsLayout):
        vlog(f"[UI] layout {layout.value}")
        apply_layout_to(self.ids, layout)

    def set_playing(self, playing: bool):
        self.ids.pause_resume_btn.icon = app_config.ICON_PAUSE if playing else app_config.ICON_PLAY

    def set_seek_range(self, max_ms: int):
        self.ids.seek_slider.max = max(int(max_ms), 1)

    def set_seek_position(self, ms: int):
        self.seek_bar.push_position(self.ids.seek_slider, ms)

    def set_elapsed_text(self, text: str):
        self.ids.current_time_label.text = text

    def set_total_text(self, text: str):
        self.ids.total_time_label.text = text

    def show_error(self, message: str):
        log(f"[UI] {message}")
        self.ids.status_label.text = message
