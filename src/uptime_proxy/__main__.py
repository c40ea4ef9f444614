from uptime_proxy.main import main

main()
