from branch_guard.action import main

if __name__ == "__main__":
    raise SystemExit(main())
