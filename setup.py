from setuptools import find_packages, setup


setup(
    name="restful_foundation",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "aiohttp>=3.9",  # HTTP-транспорт с пулом соединений и cookie
        "pydantic>=2.0",  # Модели сущностей и разбор JSON
        "pydantic-settings>=2.0",  # Настройки из окружения
        "python-dotenv",  # Для работы с .env файлами
        "click>=8.1.0",  # Для CLI
        "rich>=13.0.0",  # Для красивого вывода
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "restful=restful_foundation.__main__:cli",
        ],
    },
    description="Типизированный REST-клиент с общим транспортом и cookie",
    author="Your Name",
)
