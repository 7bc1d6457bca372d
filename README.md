# sensorview

This package generates simulated environmental sensor readings, stores them in SQLite and shows them as live graphs.

It installs three commands. By default all three use one database file, `sensor_data.db`, in the current directory.

- `sensorview-simulate` writes a random reading to the `sensor_readings` table every ten seconds. Each reading holds a temperature of 15–25 °C, a humidity of 40–60 % and an illuminance of 300–700 lux, with values rounded to two decimals. The reading is stamped with the local time, and a line is printed for each one.
- `sensorview-visualize` shows the latest 100 readings as three line graphs over fixed ranges: 15–35 °C, 20–80 % and 0–1000 lux. The newest values are shown at the top of the window. It checks for new rows once a second and prints a line for each new reading. The database file must already hold the `sensor_readings` table, so run the simulator first.
- `sensorview-analyze` opens the database read-only and shows up to 500 readings on axes that are scaled to the data. Each graph has:
  - a seven-point centred moving average
  - a mean line
  - a box with the mean, median, sample standard deviation, minimum and maximum

  It checks for new rows on every frame. Once it holds 500 readings it takes in no new ones.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Usage

Start the simulator in one terminal:

```
sensorview-simulate
sensorview-simulate --db other.db --interval 2 --count 30
```

- `--db` sets the database file.
- `--interval` sets the number of seconds between readings (default 10).
- `--count` stops the simulator after that many readings. Without it, the simulator runs until you press Ctrl+C.

Open a viewer in another terminal:

```
sensorview-visualize
sensorview-analyze --db other.db
```

Both viewers take `--db`. To close a viewer, close its window or press Escape.

The time labels on the x-axis are in Korean Standard Time (UTC+9). They are worked out by reading the stored timestamps as UTC and adding nine hours.

## Library use

You can use the pieces behind the commands without opening a window:

```python
from sensorview.storage import open_reader, ReadingBuffer
from sensorview.analysis import compute_statistics, format_statistics

conn = open_reader("sensor_data.db")
buffer = ReadingBuffer(500, chronological_initial=True, stop_when_full=True, log_new=False)
buffer.refresh(conn)
if len(buffer) > 1:
    stats = compute_statistics(buffer.values("temperature"))
    print("\n".join(format_statistics(stats)))
```

`sensorview.storage` provides the following:

- `open_writer` and `open_reader` open the database.
- `create_schema` creates the table.
- `insert_reading` stores a reading.
- `table_exists`, `count_rows` and `latest_timestamp` query the table.
- `SensorReading` and `ReadingBuffer` hold readings. `ReadingBuffer.refresh` returns the number of readings it added.

`sensorview.analysis` provides `compute_statistics`, `moving_average`, `axis_ranges`, `y_axis_labels`, `format_kst_time` and `format_statistics`. `compute_statistics` raises `ValueError` when it is given fewer than two values.

## Limitations

The package does not read from real sensors. The only source of readings is the random simulator. The viewers only display data; they cannot export graphs or statistics.