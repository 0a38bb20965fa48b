"""
Sample Sketches
===============
Bundled TFT_eSPI sketches used by the CLI (``sample:<name>``) and the tests.
"""

from typing import Dict, List

BASIC_SAMPLE = """// TFT Display Example
#include <TFT_eSPI.h>

TFT_eSPI tft = TFT_eSPI();

enum State { HOME, CONFIG, FIRING, DONE };
State curState = HOME;

void setup() {
  tft.init();
  tft.setRotation(1);
}

void loop() {
  if (curState == HOME) {
    drawHome();
  } else if (curState == CONFIG) {
    drawConfig();
  }

  handleTouch();
}

void drawHome() {
  tft.fillScreen(TFT_BLACK);
  tft.setTextColor(TFT_WHITE);
  tft.setFreeFont(&FreeSansBold24pt7b);
  tft.drawString("TFT SIMULATOR", 190, 50);

  // Green button
  tft.fillSmoothRoundRect(65, 200, 250, 55, 15, TFT_GREEN, TFT_BLACK);
  tft.setTextColor(TFT_BLACK);
  tft.drawString("START", 190, 225);
}

void drawConfig() {
  tft.fillScreen(TFT_DARKGREY);
  tft.setTextColor(TFT_WHITE);
  tft.drawString("Configuration", 190, 50);

  // Back button
  tft.fillRect(20, 20, 80, 40, TFT_RED);
  tft.setTextColor(TFT_WHITE);
  tft.drawString("BACK", 60, 35);
}

void handleTouch() {
  uint16_t x, y;
  if (tft.getTouch(&x, &y)) {
    if (curState == HOME) {
      // Start button: x=65-315, y=200-255
      if (x >= 65 && x <= 315 && y >= 200 && y <= 255) {
        curState = CONFIG;
      }
    } else if (curState == CONFIG) {
      // Back button: x=20-100, y=20-60
      if (x >= 20 && x <= 100 && y >= 20 && y <= 60) {
        curState = HOME;
      }
    }
  }
}
"""

ADVANCED_SAMPLE = """// Advanced TFT Example with multiple screens
#include <TFT_eSPI.h>

TFT_eSPI tft = TFT_eSPI();

enum State { MENU, SETTINGS, DISPLAY_TEST, INFO };
State currentState = MENU;

void setup() {
  tft.init();
  tft.setRotation(1);
  tft.fillScreen(TFT_BLACK);
}

void loop() {
  switch(currentState) {
    case MENU: drawMenu(); break;
    case SETTINGS: drawSettings(); break;
    case DISPLAY_TEST: drawDisplayTest(); break;
    case INFO: drawInfo(); break;
  }
  handleTouch();
}

void drawMenu() {
  tft.fillScreen(TFT_NAVY);
  tft.setTextColor(TFT_WHITE);
  tft.drawString("MAIN MENU", 190, 30);

  // Menu buttons
  tft.fillRoundRect(50, 100, 280, 50, 10, TFT_BLUE);
  tft.drawString("SETTINGS", 190, 120);

  tft.fillRoundRect(50, 170, 280, 50, 10, TFT_GREEN);
  tft.drawString("DISPLAY TEST", 190, 190);

  tft.fillRoundRect(50, 240, 280, 50, 10, TFT_ORANGE);
  tft.drawString("INFO", 190, 260);
}
"""

# Touch checks live inside the drawing functions so that every screen
# carries its own zones.
INTERACTIVE_SAMPLE = """// Interactive TFT Example
#include <TFT_eSPI.h>

TFT_eSPI tft = TFT_eSPI();

enum State { MENU, SETTINGS, DISPLAY_TEST };
State currentState = MENU;

void setup() {
  tft.init();
  tft.setRotation(1);
}

void loop() {
  switch(currentState) {
    case MENU: drawMenu(); break;
    case SETTINGS: drawSettings(); break;
    case DISPLAY_TEST: drawDisplayTest(); break;
  }
}

void drawMenu() {
  tft.fillScreen(TFT_NAVY);
  tft.drawString("MAIN MENU", 190, 30);

  tft.fillRoundRect(50, 100, 280, 50, 10, TFT_BLUE);
  tft.drawString("SETTINGS", 190, 125);
  tft.fillRoundRect(50, 170, 280, 50, 10, TFT_GREEN);
  tft.drawString("DISPLAY TEST", 190, 195);

  uint16_t x, y;
  if (tft.getTouch(&x, &y)) {
    if (x >= 50 && x <= 330 && y >= 100 && y <= 150) {
      currentState = SETTINGS;
    }
    if (x >= 50 && x <= 330 && y >= 170 && y <= 220) {
      currentState = DISPLAY_TEST;
    }
  }
}

void drawSettings() {
  tft.fillScreen(TFT_DARKGREY);
  tft.drawString("Settings", 190, 30);
  tft.drawLine(20, 60, 360, 60, TFT_WHITE);
  tft.fillCircle(60, 120, 20, TFT_YELLOW);

  // Back button
  tft.fillRect(20, 350, 80, 40, TFT_RED);
  tft.drawString("BACK", 60, 370);
  if (x >= 20 && x <= 100 && y >= 350 && y <= 390) { currentState = MENU; }
}

void drawDisplayTest() {
  tft.fillScreen(TFT_BLACK);
  tft.fillRect(0, 0, 95, 420, TFT_RED);
  tft.fillRect(95, 0, 95, 420, TFT_GREEN);
  tft.fillRect(190, 0, 95, 420, TFT_BLUE);
  tft.fillRect(285, 0, 95, 420, TFT_WHITE);
  tft.drawRect(20, 350, 80, 40, TFT_BLACK);
  if (x >= 20 && x <= 100 && y >= 350 && y <= 390) { currentState = MENU; }
}
"""

SAMPLES: Dict[str, str] = {
    "basic": BASIC_SAMPLE,
    "advanced": ADVANCED_SAMPLE,
    "interactive": INTERACTIVE_SAMPLE,
}


def list_samples() -> List[str]:
    return sorted(SAMPLES)


def get_sample(name: str) -> str:
    """
    Look up a bundled sketch.

    Raises:
        KeyError: If no sample has that name
    """
    try:
        return SAMPLES[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown sample '{name}'. Available: {', '.join(list_samples())}") from None
