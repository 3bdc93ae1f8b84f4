from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Org is addressed as https://{OKTA_ORG_NAME}.{OKTA_BASE_URL}
    OKTA_ORG_NAME: str = "dev-000000"
    OKTA_BASE_URL: str = "okta.com"

    # API token used with the SSWS authorization scheme
    OKTA_API_TOKEN: str = ""

    # Seconds before a single HTTP request is abandoned
    OKTA_HTTP_TIMEOUT: float = 30.0

    LOG_LEVEL: str = "INFO"

    @property
    def org_url(self) -> str:
        return f"https://{self.OKTA_ORG_NAME}.{self.OKTA_BASE_URL}"

    class Config:
        env_file = ".env"

settings = Settings()
