from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "DEALCALC_"}

    # NPV discount rate (annual %)
    discount_rate: float = 8.0

    # Newton IRR solver
    irr_initial_guess: float = 0.10
    irr_tolerance: float = 1e-4
    irr_max_iterations: int = 100

    # Unknown deal-type tags fall back to all-cash unless strict
    strict_deal_types: bool = False

    # App
    log_level: str = "INFO"


settings = Settings()
