# daisyplay

Building blocks for a player of DAISY 2.02 and DAISY 3 talking books and of
Audio-CDs on Linux: finding a book's navigation files, sizing its item
table, reading SMIL clip times, laying items out on screens, moving through
them, and finding the sound devices to play on.

## Installing

```
pip install .
```

The package has no dependencies beyond the standard library. Some functions
start programs that are found on most Linux systems: `amixer`
(alsa-utils) and `pactl` (pulseaudio-utils) for sound devices, and
`cddbget` for Audio-CD titles.

## Modules

- `daisyplay.paths` – `find_index_names(mount_point)` looks below a
  directory for `ncc.html`, an `.ncx` and an `.opf` file and returns an
  `IndexNames`; `find_realpath_name`, `find_dir_content` and
  `convert_url_name` are the searches and the `%XX` decoding it is built on.
- `daisyplay.reader` – `iter_nodes(text)` and `iter_file_nodes(path)` yield
  a document's element starts, element ends and text as `Node` objects;
  `skip_to_anchor` advances to the element with a given id; `BookInfo`
  collects version, title, page count and total time from `meta` elements.
- `daisyplay.timeparse` – `read_time("1:02:03.5")` gives `3723.5`;
  `parse_clip_value("npt=12.5s")` gives `12.5`; `get_clips` converts a
  clip's begin and end; `split_clock` splits seconds into hours, minutes
  and seconds.
- `daisyplay.book` – `create_book(mount_point)` returns a `Book` with its
  version, index file names and an item table of the right size (DAISY
  2.02 from `ncc.html`, DAISY 3 from the OPF and NCX files; a directory
  with neither gets an `ncc.html` written by `create_ncc_html` from its
  SMIL files). `calculate_times(items)` sets each `Item`'s begin and
  duration from the audio clips of its SMIL file and returns the total;
  `layout_items(items, max_y)` places items on screens and cuts long
  labels. Problems are raised as `BookError`.
- `daisyplay.navigation` – `Navigator` keeps the cursor, the playing item
  and the level shown: `next_item`, `previous_item`, `change_level`,
  `search`, `page_down`, `page_up`, `item_duration`, `seek_clip` and
  `find_page`. `format_total_length` and `format_minutes` format times as
  `HH:MM:SS` and `MM:SS`.
- `daisyplay.sound` – `list_sound_devices()` lists the default ALSA
  device, each ALSA card and each PulseAudio sink as `SoundDevice`
  objects with volume and mute state; `control_command(device, action)`
  builds (but does not run) the command to mute or change the volume;
  `find_device` picks a device by its `device:type` name.
- `daisyplay.cddb` – `build_audiocd_toc(lsns, leadout, max_y)` turns track
  start sectors into `Track` objects and a total length;
  `fetch_cddb(device, tracks)` runs `cddbget` and applies the disc and
  track titles through `parse_cddb`.

## Example

```python
from daisyplay.book import create_book
from daisyplay.navigation import format_total_length

book = create_book("/path/to/book")
print(book.daisy_version, book.total_items)
print(format_total_length(3725))   # 01:02:05
```

## What it does not do

The package has no command to run and no interactive screen: there is no
key handling, no audio playback and no reading of a CD drive. It does not
store bookmarks or preferences, and `create_book` sizes the item table but
does not fill in item labels, SMIL files or page numbers from the index
files.