from setuptools import setup


setup(
    name="notebook-dashboard",
    version="0.1.0",
    description="Normalize hand-maintained notebook execution tracking workbooks into dashboard records",
    packages=["notebook_dashboard"],
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "pandas",
        "openpyxl",
    ],
    extras_require={
        "excel-legacy": ["xlrd"],
        "ods": ["odfpy"],
        "all": ["xlrd", "odfpy"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "notebook-dashboard=notebook_dashboard.cli:main",
        ]
    },
)
