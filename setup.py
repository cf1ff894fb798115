from setuptools import setup, find_packages

setup(
    name="uiauto-appium",
    version="1.0.0",
    packages=find_packages(include=["uiauto_appium", "uiauto_appium.*"]),
    install_requires=[
        "Appium-Python-Client>=3.0.0",
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0", "selenium>=4.12.0"],
    },
    python_requires=">=3.8",
    package_data={
        "uiauto_appium": ["maps/*.yaml", "schemas/*.json"],
    },
    entry_points={
        "console_scripts": [
            "uiauto-appium=uiauto_appium.cli:main",
        ],
    },
)
