from autocenter_events.cli import main

raise SystemExit(main())
