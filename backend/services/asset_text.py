"""
Templated text artifacts for generated projects

Everything here is plain string interpolation: the same description always
yields the same documents.
"""
from typing import Dict, List, Union

from models.project import ProjectKind


SOFTWARE_TECH_STACK = [
    "React",
    "TypeScript",
    "Tailwind CSS",
    "Node.js",
    "Express.js",
    "PostgreSQL",
    "Docker",
    "AWS",
]


def software_requirements_document(description: str) -> str:
    """Product Requirements Document for a software project"""
    return f"""
# Product Requirements Document (PRD)

## 1. Introduction & Vision
**Project Description:** {description}

**Vision:** Deliver a reliable, easy-to-use application that solves the core problem described above, with a smooth user experience, a focused feature set and dependable performance.

## 2. User Personas & Audience
*   **Primary User (The Doer):** Uses the product every day to get their core tasks done. Values speed, simplicity and a clean interface.
*   **Administrator (The Manager):** Manages accounts and configuration and keeps an eye on usage. Needs analytics and user management tools.
*   **New User (The Explorer):** Arrives for the first time and needs clear onboarding that explains what the product is for.

## 3. Features & Requirements
### Core Features (MVP):
-   **User Authentication:** Sign-up, login, password reset and logout.
-   **Dashboard:** A home screen with key information, recent activity and navigation to the core features.
-   **Core Feature A:** The primary value proposition, implemented from the project description.
-   **User Profile & Settings:** Account details, preferences and notification settings.

### Technical Requirements:
-   **Frontend:** A responsive single-page application built with a modern JavaScript framework.
-   **Backend:** A stateless, secure RESTful or GraphQL API that scales horizontally.
-   **Database:** A relational (e.g., PostgreSQL) or document (e.g., MongoDB) database.
-   **Deployment:** Containerized with Docker and deployed on a major cloud provider (AWS, GCP, Azure).
-   **Security:** Protection against common web vulnerabilities (XSS, CSRF, SQL Injection) and HTTPS everywhere.

## 4. Success Metrics
*   **User Adoption:** 1,000 active users within 3 months of launch.
*   **Engagement:** DAU/MAU ratio above 20%.
*   **Performance:** 95% of API responses under 200ms.
*   **Reliability:** 99.9% uptime.

## 5. Future Scope (Post-MVP)
-   Mobile applications (iOS and Android).
-   Third-party integrations (e.g., Slack, Google Workspace).
-   Advanced analytics and reporting.
-   Team collaboration features.
"""


def software_tech_stack() -> List[str]:
    """Recommended technologies, in display order"""
    return list(SOFTWARE_TECH_STACK)


def hardware_blueprint(description: str) -> str:
    """Technical blueprint for a hardware project"""
    return f"""
# Technical Blueprint

## 1. Project Overview & Goals
**Project Description:** {description}

**Primary Goal:** Design, build and test a working hardware prototype that performs the tasks in the description, reliably and inside a suitable enclosure.

## 2. Core Functionality
- **Input:** The device reads input from [e.g., sensors, buttons, wireless signals].
- **Processing:** A microcontroller processes the input in its embedded firmware.
- **Output:** The device responds with [e.g., a display, motor movement, audio, data transmission].

## 3. Component Specification
*   **Microcontroller:** ESP32 when Wi-Fi or Bluetooth is needed; Arduino Uno or Nano for simpler, offline builds.
*   **Primary Sensor/Module:** The part that enables the core function, such as a BME280 for environmental sensing or an MPU-6050 for motion tracking.
*   **Power Supply Circuit:** A regulated 5V or 3.3V supply, from USB through an LDO regulator or from a LiPo cell with a charge and protection module (e.g., TP4056).
*   **User Interface:** Tactile buttons for input and a 0.96" OLED or WS2812B LEDs for status.

## 4. Power & Enclosure Design
*   **Power Budget:** Sum the current draw of every component to size the supply, especially for battery operation.
*   **Enclosure:** A 3D-printed PETG or PLA case for prototyping, with PCB mounting points, port openings (USB, power) and ventilation where needed.
"""


def hardware_materials_list(description: str) -> str:
    """Bill of materials and tools for a hardware project"""
    return f"""
# Materials & Tools Required

## I. Electronic Components
- **Microcontroller:** 1x ESP32 Development Board (Wi-Fi/Bluetooth) or Arduino Uno R3.
- **Primary Sensor/Module:** 1x [Relevant sensor, e.g., DHT22 for temp/humidity, HC-SR04 for distance]. Needed for: *{description}*.
- **Resistors:** 1x Assorted resistor kit (1kΩ, 10kΩ and 220Ω are the most used).
- **LEDs:** 5x Standard 5mm LEDs in assorted colors for status.
- **Buttons:** 2x Tactile push buttons.
- **Connecting Wires:** 1x Pack of male-to-male and male-to-female jumper wires.
- **Power Supply:** 1x 5V/1A USB power adapter and USB cable.

## II. Prototyping & Assembly
- **Breadboard:** 1x 830-point solderless breadboard.
- **Soldering Iron & Solder:** For permanent circuits.
- **Perfboard/PCB:** 1x Prototyping perfboard for the final build.
- **Enclosure:** Access to a 3D printer for the case.

## III. Tools
- **Digital Multimeter:** For checking connections and voltage levels.
- **Wire Strippers & Cutters:** For preparing wires.
- **Screwdriver Set:** For final assembly.
- **Computer:** With the Arduino IDE or the PlatformIO VSCode extension.
"""


def hardware_build_guide(description: str) -> str:
    """Step-by-step build guide for a hardware project"""
    return f"""
# Step-by-Step Build Guide

**Project:** {description}

## 0. Prerequisites & Safety
- **Safety First:** Disconnect power before changing the circuit. Solder with ventilation and safety glasses.
- **Firmware:** Install the libraries for your components from the Arduino IDE Library Manager before starting.

## 1. Breadboard Prototyping
1.  **Mount Microcontroller:** Seat the ESP32 or Arduino across the breadboard's central divider.
2.  **Power Rails:** Wire 5V/VIN and GND to the red (+) and blue (-) rails.
3.  **Connect Core Sensor:** Follow the schematic to wire the primary sensor, checking VCC, GND and data pins.
4.  **Add UI Components:** Wire the LEDs (with current-limiting resistors) and buttons to free digital I/O pins.

## 2. Firmware Upload & Initial Test
1.  **Connect to PC:** Plug the microcontroller into your computer over USB.
2.  **Select Board & Port:** Choose the board (e.g., "ESP32 Dev Module") and its COM port in the Arduino IDE.
3.  **Compile & Upload:** Upload a small test sketch that exercises each component (blink an LED, print sensor data to the Serial Monitor).
4.  **Debug:** Watch the Serial Monitor for readings or errors.

## 3. Final Assembly
1.  **Solder Circuit:** Move the working prototype onto perfboard, planning the layout first.
2.  **Mount in Enclosure:** Fix the perfboard and any external parts (sensors, displays) inside the printed case.
3.  **Final Test:** Power the assembled device and test every feature.
"""


def generate_text_assets(kind: ProjectKind, description: str) -> Dict[str, Union[str, List[str]]]:
    """All text artifacts for a kind, keyed by resources attribute name"""
    if kind == ProjectKind.SOFTWARE:
        return {
            "prd": software_requirements_document(description),
            "tech_stack": software_tech_stack(),
        }
    return {
        "blueprint": hardware_blueprint(description),
        "build_guide": hardware_build_guide(description),
        "materials_list": hardware_materials_list(description),
    }
