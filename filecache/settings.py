from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from filecache.codec import CodecName

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    filecache_storage_dir: str = ""  # empty = derive from the files paths below
    file_private_path: str = ""
    file_public_path: str = "files"

    filecache_payload_ext: str = ".cache"
    filecache_codec: CodecName = "pickle"

    filecache_file_mode: int = 0o664  # applied after every write
    filecache_dir_mode: int = 0o775

    @field_validator("filecache_file_mode", "filecache_dir_mode", mode="before")
    @classmethod
    def octal_mode(cls, v):
        # "0664", "664" and "0o664" from the environment are all octal
        if isinstance(v, str):
            return int(v.strip(), 8)
        return v
