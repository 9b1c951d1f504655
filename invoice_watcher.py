#!/usr/bin/env python3
"""
Invoice Folder Watcher - Automatic Transcription

Watches a folder for new invoice files, sends each one through the
invoice assistant API (transcribe, then suggest categories) and saves the
CSV export for accounting import.

Usage:
    python invoice_watcher.py --watch-folder ./invoices-incoming
"""

import argparse
import json
import time
from datetime import datetime
from pathlib import Path

import requests
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from invoice_assistant.services.file_encoder import guess_mime_type

# Configuration
API_BASE_URL = "http://127.0.0.1:8000"
SUPPORTED_SUFFIXES = {".pdf", ".png", ".jpg", ".jpeg", ".webp"}


class InvoiceHandler(FileSystemEventHandler):
    """Handles new invoice file events"""

    def __init__(self, watch_folder, export_folder, processed_folder, failed_folder,
                 api_url=API_BASE_URL, suggest_categories=True):
        self.watch_folder = Path(watch_folder)
        self.export_folder = Path(export_folder)
        self.processed_folder = Path(processed_folder)
        self.failed_folder = Path(failed_folder)
        self.api_url = api_url.rstrip("/")
        self.suggest_categories = suggest_categories
        self.processed_files = set()

        # Create folders if they don't exist
        for folder in (self.export_folder, self.processed_folder, self.failed_folder):
            folder.mkdir(parents=True, exist_ok=True)

    def on_created(self, event):
        """Called when a file is created in the watched folder"""
        if event.is_directory:
            return

        file_path = Path(event.src_path)

        if file_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            return

        # Avoid processing the same file multiple times
        if file_path in self.processed_files:
            return

        # Small delay to ensure file is fully written
        time.sleep(1)

        # Check if file still exists (might have been moved)
        if not file_path.exists():
            return

        self.processed_files.add(file_path)
        self.process_invoice(file_path)

    def process_invoice(self, file_path: Path):
        """Transcribe one invoice through the API and export it"""
        print("\n" + "=" * 70)
        print(f"📄 NEW INVOICE DETECTED: {file_path.name}")
        print("=" * 70)
        print(f"Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"Size: {file_path.stat().st_size:,} bytes")
        print()

        try:
            print("🔄 Uploading to API...")
            with open(file_path, "rb") as f:
                files = {"file": (file_path.name, f, guess_mime_type(file_path.name))}
                response = requests.post(f"{self.api_url}/invoices/extract", files=files, timeout=180)

            if response.status_code != 200:
                self.handle_error(file_path, _api_error(response))
                return

            state = response.json()

            if self.suggest_categories:
                print("✨ Getting all category suggestions...")
                response = requests.post(f"{self.api_url}/invoices/current/suggest-categories", timeout=180)
                if response.status_code == 200:
                    state = response.json()
                else:
                    # Categories are best-effort; the export still goes out without them
                    print(f"⚠️  {_api_error(response)}")

            response = requests.get(f"{self.api_url}/invoices/current/export.csv", timeout=30)
            if response.status_code != 200:
                self.handle_error(file_path, _api_error(response))
                return

            self.handle_success(file_path, state, response.content)

        except requests.exceptions.Timeout:
            self.handle_error(file_path, "Timeout")
        except requests.exceptions.RequestException as e:
            self.handle_error(file_path, str(e))

    def handle_success(self, file_path: Path, state: dict, csv_bytes: bytes):
        """Save the CSV export and move the source file out of the watch folder"""
        record = state["record"]
        totals = state.get("formatted_totals") or {}

        print()
        print("📊 EXTRACTION RESULTS:")
        print(f"   From: {record.get('from') or 'N/A'}")
        print(f"   Invoice #: {record.get('invoiceNumber') or 'N/A'}")
        print(f"   Date: {record.get('invoiceDate') or 'N/A'}")
        print(f"   Total: {totals.get('total', 'N/A')}")
        for item in record["lineItems"]:
            print(f"   - {item['description']}: {item['category'] or 'No category'}")
        print()

        export_path = self.export_folder / f"{file_path.stem}_invoice_{record.get('invoiceNumber') or 'data'}.csv"
        export_path.write_bytes(csv_bytes)
        print(f"💾 CSV saved to: {export_path}")

        dest_path = self.processed_folder / file_path.name
        file_path.rename(dest_path)
        print(f"📁 Moved to: {dest_path}")

        self.log_processing(file_path.name, "transcribed", record, dest_path, export_path)
        print("=" * 70)

    def handle_error(self, file_path: Path, error_msg: str):
        """Handle processing error"""
        print(f"\n❌ Processing failed: {error_msg}")

        dest_path = self.failed_folder / file_path.name
        file_path.rename(dest_path)
        print(f"📁 Moved to: {dest_path}")

        self.log_processing(file_path.name, "failed", None, dest_path, None, error=error_msg)
        print("=" * 70)

    def log_processing(self, filename, status, record, dest_path, export_path, error=None):
        """Append processing results to a JSON log next to the watch folder"""
        log_file = self.watch_folder.parent / "processing_log.json"

        if log_file.exists():
            with open(log_file, "r") as f:
                log_data = json.load(f)
        else:
            log_data = []

        log_data.append({
            "timestamp": datetime.now().isoformat(),
            "filename": filename,
            "status": status,
            "record": record,
            "error": error,
            "destination": str(dest_path),
            "export": str(export_path) if export_path else None,
        })

        with open(log_file, "w") as f:
            json.dump(log_data, f, indent=2)


def _api_error(response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = response.text
    return f"API returned {response.status_code}: {detail}"


def main():
    parser = argparse.ArgumentParser(
        description="Watch a folder for invoices and transcribe them automatically"
    )
    parser.add_argument(
        "--watch-folder",
        default="./invoices-incoming",
        help="Folder to watch for new invoices (default: ./invoices-incoming)"
    )
    parser.add_argument(
        "--export-folder",
        default="./invoices-csv",
        help="Folder for CSV exports (default: ./invoices-csv)"
    )
    parser.add_argument(
        "--processed-folder",
        default="./invoices-processed",
        help="Folder for transcribed invoices (default: ./invoices-processed)"
    )
    parser.add_argument(
        "--failed-folder",
        default="./invoices-failed",
        help="Folder for invoices that could not be transcribed (default: ./invoices-failed)"
    )
    parser.add_argument(
        "--no-categories",
        action="store_true",
        help="Skip AI category suggestions"
    )
    parser.add_argument(
        "--api-url",
        default=API_BASE_URL,
        help=f"API base URL (default: {API_BASE_URL})"
    )

    args = parser.parse_args()

    watch_folder = Path(args.watch_folder)
    watch_folder.mkdir(exist_ok=True)

    event_handler = InvoiceHandler(
        args.watch_folder,
        args.export_folder,
        args.processed_folder,
        args.failed_folder,
        api_url=args.api_url,
        suggest_categories=not args.no_categories,
    )
    observer = Observer()
    observer.schedule(event_handler, str(watch_folder), recursive=False)
    observer.start()

    print("=" * 70)
    print("🔍 INVOICE WATCHER - AUTOMATIC TRANSCRIPTION")
    print("=" * 70)
    print(f"Watching: {watch_folder.absolute()}")
    print(f"CSV exports → {Path(args.export_folder).absolute()}")
    print(f"Transcribed → {Path(args.processed_folder).absolute()}")
    print(f"Failed → {Path(args.failed_folder).absolute()}")
    print(f"API: {args.api_url}")
    print()
    print("💡 Drop PDF or image invoices into the watch folder to process them")
    print("Press Ctrl+C to stop")
    print("=" * 70)
    print()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n\n👋 Stopping watcher...")
        observer.stop()

    observer.join()
    print("✅ Watcher stopped")


if __name__ == "__main__":
    main()
