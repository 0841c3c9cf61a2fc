# setup.py
from setuptools import find_packages, setup

setup(
    name="workshop-ops",
    version="0.1.0",
    packages=find_packages(include=["app", "app.*", "configs", "configs.*"]),
    include_package_data=True,
    package_data={"configs": ["*.yaml"]},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "SQLAlchemy[asyncio]>=2.0",
        "asyncpg>=0.29",
        "psycopg[binary]>=3.1",
        "alembic>=1.13",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "email-validator>=2.1",
        "structlog>=24.1",
        "sentry-sdk>=1.40",
        "slowapi>=0.1.9",
        "limits>=3.7",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
            "aiosqlite>=0.19",
        ],
    },
)
