#!/usr/bin/env python3
"""
SuperFerry Reservation System - CLI Entry Point

Every choice is given on the command line; nothing prompts.

Usage:
    python main.py --list-sailings                          # Sailing report
    python main.py --add-ferry "QUEEN OF SURREY" 200 300    # Ferry with HCLL/LCLL (m)
    python main.py --delete-ferry "QUEEN OF SURREY"         # Refused while sailings use it
    python main.py --add-sailing ABC-01-08 "QUEEN OF SURREY"
    python main.py --delete-sailing ABC-01-08               # Also deletes its reservations
    python main.py --delete-all-sailings                    # Every sailing and reservation
    python main.py --matching-sailings 1.8 5.0              # Sailings with room for a vehicle
    python main.py --book ABC123 ABC-01-08 604-555-1234 1.8 5.0
    python main.py --cancel ABC123 ABC-01-08                # Frees the lane it used
    python main.py --check-in ABC123 ABC-01-08              # Shows vehicle and fare
    python main.py --list-ferries | --list-reservations | --list-vehicles
    python main.py --reset                                  # Empty all data files
    python main.py --data-dir /tmp/ferry --list-sailings    # Use another data directory
"""

import argparse
import sys

from superferry.errors import ReservationError
from superferry.services.fares import vehicle_category
from superferry.system import FerrySystem


def _choose(sailing_id):
    """Selection callback that picks the reservation on ``sailing_id``."""
    def select(candidates):
        ids = [r.sailing_id for r in candidates]
        return sailing_id if sailing_id in ids else None
    return select


def list_ferries(system):
    ferries = system.schedule.list_ferries()
    print("=== Ferries ===")
    if not ferries:
        print("[INFO] No ferries found.")
        return
    print(f"{'#':>3}  {'Ferry Name':<27} {'HCLL (m)':>9} {'LCLL (m)':>9}")
    for i, f in enumerate(ferries, 1):
        print(f"{i:>3}  {f.name:<27} {f.high_capacity:>9} {f.low_capacity:>9}")


def list_sailings(system):
    rows = system.schedule.sailing_report()
    print("=" * 74)
    print("  Sailing Report")
    print("=" * 74)
    if not rows:
        print("[INFO] No sailings available in the system.")
        return
    print(f"{'#':>3}  {'SailingID':<11} {'Ferry Name':<27} {'HRL (m)':>8} {'LRL (m)':>8} "
          f"{'Booked':>7} {'In':>4}")
    print("-" * 74)
    for i, r in enumerate(rows, 1):
        print(f"{i:>3}  {r.sailing_id:<11} {r.ferry_name:<27} {r.high_remaining:>8.1f} "
              f"{r.low_remaining:>8.1f} {r.booked:>7} {r.checked_in:>4}")


def list_reservations(system):
    reservations = system.lifecycle.list_reservations()
    print("=== Current Reservations ===")
    if not reservations:
        print("[INFO] No reservations found.")
        return
    for i, r in enumerate(reservations, 1):
        print(f"{i}. Plate: {r.plate}, Sailing: {r.sailing_id}, "
              f"Onboard: {'Yes' if r.is_onboard else 'No'}, Lane: {r.lane_used}")


def list_vehicles(system):
    vehicles = system.lifecycle.list_vehicles()
    print("=== Current Vehicles ===")
    if not vehicles:
        print("[INFO] No vehicles found.")
        return
    for i, v in enumerate(vehicles, 1):
        print(f"{i}. Plate: {v.plate}, Phone: {v.phone}, Height: {v.height:.1f}, "
              f"Length: {v.length:.1f} [{vehicle_category(v)}]")


def matching_sailings(system, height, length):
    sailings = system.schedule.matching_sailings(float(height), float(length))
    print(f"=== Sailings with room for {float(height):.1f} m x {float(length):.1f} m ===")
    if not sailings:
        print("[INFO] No sailing has room for this vehicle.")
        return
    for i, s in enumerate(sailings, 1):
        print(f"{i}. {s.sailing_id} on {s.ferry_name} "
              f"(HRL {s.high_remaining:.1f} m, LRL {s.low_remaining:.1f} m)")


def add_ferry(system, name, high, low):
    ferry = system.schedule.add_ferry(name, int(high), int(low))
    print(f"Ferry created: {ferry.name} (HCLL {ferry.high_capacity} m, LCLL {ferry.low_capacity} m)")


def delete_ferry(system, name):
    system.guards.delete_ferry(name)
    print(f"Ferry deleted: {name}")


def add_sailing(system, sailing_id, ferry_name):
    sailing = system.schedule.add_sailing(sailing_id, ferry_name)
    print(f"Sailing created: {sailing.sailing_id} on {sailing.ferry_name} "
          f"(HRL {sailing.high_remaining:.1f} m, LRL {sailing.low_remaining:.1f} m)")


def delete_sailing(system, sailing_id):
    removed = system.guards.delete_sailing(sailing_id)
    print(f"Sailing deleted: {sailing_id} ({removed} reservation(s) removed)")


def delete_all_sailings(system):
    removed = system.guards.delete_all_sailings()
    print(f"Deleted {removed} sailing(s) and their reservations")


def book(system, plate, sailing_id, phone, height, length):
    reservation = system.lifecycle.create(plate, sailing_id, phone, float(height), float(length))
    print(f"Reservation confirmed: {reservation.plate} on {reservation.sailing_id} "
          f"(lane {reservation.lane_used})")


def cancel(system, plate, sailing_id):
    result = system.lifecycle.delete(plate, _choose(sailing_id))
    if result is None:
        print(f"No valid reservation for {plate} on {sailing_id}. Nothing deleted.")
        return 1
    print(f"Reservation deleted: {plate} on {result.reservation.sailing_id}")
    if result.capacity_restored:
        print(f"Freed sailing lane space (lane {result.reservation.lane_used})")
    return 0


def check_in(system, plate, sailing_id):
    result = system.lifecycle.check_in(plate, _choose(sailing_id))
    if result is None:
        print(f"No pending reservation for {plate} on {sailing_id}.")
        return 1
    print(f"Vehicle {plate} checked in on {result.reservation.sailing_id}")
    if result.vehicle is not None:
        v = result.vehicle
        print(f"  Type: {vehicle_category(v)} | Height: {v.height:.1f} m | "
              f"Length: {v.length:.1f} m | Fare: ${result.fare:.2f}")
    else:
        print("  [WARN] Vehicle info not found; fare unavailable.")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description="SuperFerry Reservation System -- ferries, sailings and vehicle reservations",
    )
    parser.add_argument("--data-dir", type=str, default=None,
                        help="Directory holding the .dat files (default: $SUPERFERRY_DATA_DIR or ./data)")
    parser.add_argument("--add-ferry", nargs=3, metavar=("NAME", "HCLL", "LCLL"),
                        help="Create a ferry with high/low ceiling lane lengths (0-3600 m)")
    parser.add_argument("--delete-ferry", metavar="NAME", help="Delete a ferry no sailing uses")
    parser.add_argument("--add-sailing", nargs=2, metavar=("SAILING_ID", "FERRY"),
                        help="Schedule a ferry as sailing TTT-DD-HH")
    parser.add_argument("--delete-sailing", metavar="SAILING_ID",
                        help="Delete a sailing and all its reservations")
    parser.add_argument("--delete-all-sailings", action="store_true",
                        help="Delete every sailing and all reservations")
    parser.add_argument("--book", nargs=5, metavar=("PLATE", "SAILING_ID", "PHONE", "HEIGHT", "LENGTH"),
                        help="Create a reservation")
    parser.add_argument("--cancel", nargs=2, metavar=("PLATE", "SAILING_ID"),
                        help="Delete a reservation and free its lane space")
    parser.add_argument("--check-in", nargs=2, metavar=("PLATE", "SAILING_ID"),
                        help="Check a reserved vehicle in")
    parser.add_argument("--list-ferries", action="store_true", help="List ferries")
    parser.add_argument("--list-sailings", action="store_true", help="Print the sailing report")
    parser.add_argument("--list-reservations", action="store_true", help="List reservations")
    parser.add_argument("--list-vehicles", action="store_true", help="List vehicles")
    parser.add_argument("--matching-sailings", nargs=2, metavar=("HEIGHT", "LENGTH"),
                        help="List sailings with room for a vehicle of this size")
    parser.add_argument("--reset", action="store_true", help="Delete ALL records in every data file")
    return parser


def run(args) -> int:
    with FerrySystem(args.data_dir) as system:
        try:
            if args.reset:
                system.reset()
                print("System reset: all data files emptied.")
            elif args.add_ferry:
                add_ferry(system, *args.add_ferry)
            elif args.delete_ferry:
                delete_ferry(system, args.delete_ferry)
            elif args.add_sailing:
                add_sailing(system, *args.add_sailing)
            elif args.delete_sailing:
                delete_sailing(system, args.delete_sailing)
            elif args.delete_all_sailings:
                delete_all_sailings(system)
            elif args.book:
                book(system, *args.book)
            elif args.cancel:
                return cancel(system, *args.cancel)
            elif args.check_in:
                return check_in(system, *args.check_in)
            elif args.list_ferries:
                list_ferries(system)
            elif args.list_reservations:
                list_reservations(system)
            elif args.list_vehicles:
                list_vehicles(system)
            elif args.matching_sailings:
                matching_sailings(system, *args.matching_sailings)
            else:
                list_sailings(system)
        except (ReservationError, ValueError) as e:
            print(f"[ERR] {e}")
            return 1
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
