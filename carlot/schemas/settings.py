from pydantic import BaseModel


class SettingsOut(BaseModel):
    dark_mode: bool = False


class DarkModeIn(BaseModel):
    enabled: bool
