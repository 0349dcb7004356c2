"""Shared fixtures: a sample garage evaluated as of 2025-06-15."""

from datetime import date

import pytest

TODAY = date(2025, 6, 15)

PANDA_ID = "11111111-1111-1111-1111-111111111111"
GOLF_ID = "22222222-2222-2222-2222-222222222222"

SAMPLE_GARAGE = """
settings:
  advanceDays: 3

cars:
  - id: 11111111-1111-1111-1111-111111111111
    name: Panda
    brand: Fiat
    model: Panda
    year: 2018
    plate: AB123CD
    mileage: 50000
    dateAdded: '2020-01-10'
    status: active
    maintenances:
      - id: aaaaaaaa-0000-0000-0000-000000000001
        type: bollo
        date: '2024-06-10'
        mileage: 42000
        cost: 180.5
        reminder:
          id: bbbbbbbb-0000-0000-0000-000000000001
          type: date
          date: '2025-06-10'
      - id: aaaaaaaa-0000-0000-0000-000000000002
        type: tagliando
        date: '2024-06-20'
        mileage: 45000
        cost: 250.0
        notes: Olio e filtri
      - id: aaaaaaaa-0000-0000-0000-000000000003
        type: gomme
        date: '2025-01-10'
        mileage: 48000
        cost: 400.0
        reminder:
          id: bbbbbbbb-0000-0000-0000-000000000002
          type: mileage
          mileage: 60000
      - id: aaaaaaaa-0000-0000-0000-000000000004
        type: revisione
        date: '2023-06-14'
        mileage: 30000
        cost: 79.0
        reminder:
          id: bbbbbbbb-0000-0000-0000-000000000003
          type: interval
          date: '2025-06-14'
          intervalValue: 2
          intervalUnit: years
    documents:
      - id: cccccccc-0000-0000-0000-000000000001
        name: Libretto
        type: application/pdf
        size: 204800
        dateAdded: '2020-01-10'

  - id: 22222222-2222-2222-2222-222222222222
    name: Golf
    brand: Volkswagen
    model: Golf
    year: 2010
    plate: ZZ999ZZ
    mileage: 180000
    status: sold
    statusDate: '2024-03-01'
    maintenances: []
"""


@pytest.fixture
def garage_file(tmp_path):
    """Path to a garage YAML file holding SAMPLE_GARAGE."""
    path = tmp_path / "garage.yaml"
    path.write_text(SAMPLE_GARAGE)
    return path
