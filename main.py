import os
os.environ["KIVY_AUDIO"] = "sdl2"

from kivymd.app import MDApp
from kivy.lang import Builder
from kivy.uix.screenmanager import ScreenManager
from jnius import autoclass

import app_config
import media_android as ma
from diag import log
from player_screen import PlayerScreen

Builder.load_file(app_config.KV_FILE)


# ---------- Diagnostics ----------
def _log_build_info():
    VERSION = autoclass('android.os.Build$VERSION')
    activity = ma.PythonActivity.mActivity
    try:
        target = activity.getApplicationInfo().targetSdkVersion
    except Exception as e:
        target = None
        log(f"[BUILD] getApplicationInfo err: {e}")
    log(f"[BUILD] SDK_INT={VERSION.SDK_INT}, targetSdk={target}")


# ================= APP =================
class MediaPlayerApp(MDApp):
    def build(self):
        self.theme_cls.theme_style = "Light"
        self.theme_cls.primary_palette = "Blue"
        sm = ScreenManager()
        sm.add_widget(PlayerScreen(name="player"))
        return sm

    def on_start(self):
        _log_build_info()
        ma.request_runtime_permissions()

    def on_pause(self):
        return True

    def on_stop(self):
        self.root.get_screen("player").teardown()


if __name__ == "__main__":
    MediaPlayerApp().run()
