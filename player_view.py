# player_view.py
from player_controller import ControlsLayout


AUDIO_WIDGETS = ("pause_resume_btn", "stop_btn", "seek_slider",
                 "current_time_label", "total_time_label")


def set_visible(widget, visible: bool):
    widget.opacity = 1 if visible else 0
    widget.disabled = not visible


def apply_layout_to(ids, layout: ControlsLayout):
    for wid in AUDIO_WIDGETS:
        set_visible(ids[wid], layout is ControlsLayout.AUDIO)
    set_visible(ids["video_area"], layout is ControlsLayout.VIDEO)
    if layout is not ControlsLayout.NEUTRAL:
        ids["status_label"].text = ""


class SeekBarBinding:
    """Routes seek slider events to the controller.

    Values the refresh pushes through push_position() reach the controller
    as non-user seeks, even when a drag is in progress.
    """

    def __init__(self, controller):
        self.controller = controller
        self._syncing = False

    def touch_down(self, slider, touch):
        if slider.collide_point(*touch.pos) and not slider.disabled:
            self.controller.begin_user_seek()

    def touch_up(self, slider, touch):
        if self.controller.user_seeking:
            self.controller.end_user_seek()

    def value_changed(self, slider, value):
        from_user = self.controller.user_seeking and not self._syncing
        self.controller.seek(int(value), from_user=from_user)

    def push_position(self, slider, ms):
        self._syncing = True
        try:
            slider.value = int(ms)
        finally:
            self._syncing = False
