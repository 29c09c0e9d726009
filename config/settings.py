from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Fee schedule (fractions, not bps: the engine works in float mana)
    PLATFORM_FEE_RATE: float = 0.005  # flat share of the bet amount
    CREATOR_FEE_RATE: float = 0.02  # scaled by prob * (1 - prob) * shares
    LIQUIDITY_FEE_RATE: float = 0.02  # scaled by prob * (1 - prob) * shares

    # Optimistic retry budget for read-match-commit cycles
    MAX_TRADE_RETRIES: int = 5

    # Tolerance for "amount exhausted" and "order filled" comparisons
    FLOAT_EPSILON: float = 1e-7

    # App
    APP_NAME: str = "CPMM Prediction Market"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev

    @model_validator(mode="after")
    def fee_rates_below_one(self) -> "Settings":
        rates = (self.PLATFORM_FEE_RATE, self.CREATOR_FEE_RATE, self.LIQUIDITY_FEE_RATE)
        if any(r < 0 for r in rates):
            raise ValueError("fee rates must be non-negative")
        if sum(rates) >= 1:
            raise ValueError("fee rates must sum to less than 1")
        return self


settings = Settings()
