import os

os.environ["PPTX_OUTPUT_DIR"] = "/tmp/slidefit_test_decks"
for _name in (
    "SLIDEFIT_PAGE_BUDGET",
    "SLIDEFIT_BLOCK_SPACING",
    "SLIDEFIT_MIN_PAGE_HEIGHT",
    "SLIDEFIT_MAX_LIST_ITEMS",
    "SLIDEFIT_MAX_CODE_LINES",
    "SLIDEFIT_MAX_TABLE_ROWS",
):
    os.environ.pop(_name, None)

import pytest

from slidefit.dsl.limits import HeightCalibration, PaginationSettings


@pytest.fixture
def settings():
    return PaginationSettings()


@pytest.fixture
def tall_list_settings():
    # 0.5in per list item
    return PaginationSettings(calibration=HeightCalibration(list_item_height=0.5))
