from cephcmd.cli import main

raise SystemExit(main())
