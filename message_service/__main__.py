from message_service.cli import main

raise SystemExit(main())
