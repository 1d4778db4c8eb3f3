from setuptools import find_packages, setup

setup(
    name="led-matrix-applet",
    version="0.1.0",
    description="Client handle for one applet slot of a segmented LED matrix display server",
    author="Garrett Johnson",
    packages=find_packages(include=["led_applet", "led_applet.*"]),
    python_requires=">=3.11",
    install_requires=[
        "numpy>=1.23",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "led-applet=led_applet.main:main",
        ],
    },
)
